"""
Unit tests for field difference reporting.
"""

from lesson_reconciliation.reconciliation.differences import find_differences


class TestFindDifferences:
    """Test cases for find_differences."""

    def test_identical_pair(self, make_internal, make_external):
        """Test an agreeing pair reports nothing."""
        assert find_differences(make_internal(), make_external()) == []

    def test_duration_difference(self, make_internal, make_external):
        """Test a duration difference message."""
        differences = find_differences(make_internal(), make_external(duration=45))

        assert differences == ['Duration mismatch: "30" in internal vs "45" in external']

    def test_teacher_difference(self, make_internal, make_external):
        """Test a teacher difference message."""
        differences = find_differences(make_internal(), make_external(teacher_name="Mr. Park"))

        assert differences == ['Teacher mismatch: "Ms. Lee" in internal vs "Mr. Park" in external']

    def test_unassigned_teacher(self, make_internal, make_external):
        """Test an internal lesson without teacher compares as Unassigned."""
        internal = make_internal(teacher_id=None, teacher_name=None)

        differences = find_differences(internal, make_external())

        assert differences == ['Teacher mismatch: "Unassigned" in internal vs "Ms. Lee" in external']

    def test_case_differences_ignored(self, make_internal, make_external):
        """Test subject and teacher case differences are not reported."""
        external = make_external(subject_name="piano", teacher_name="MS. LEE")

        assert find_differences(make_internal(), external) == []

    def test_equivalent_date_formats(self, make_internal, make_external):
        """Test equal dates in different formats are not reported."""
        internal = make_internal(start_date="2024-09-02")
        external = make_external(start_date="02/09/2024")

        assert find_differences(internal, external) == []

    def test_start_date_set_on_one_side(self, make_internal, make_external):
        """Test a date present on one side only is reported."""
        internal = make_internal(start_date=None)
        external = make_external(start_date="2024-09-02")

        differences = find_differences(internal, external)

        assert differences == ['Start date mismatch: "Not set" in internal vs "2024-09-02" in external']

    def test_fixed_order(self, make_internal, make_external):
        """Test messages follow name, duration, subject, teacher, date order."""
        internal = make_internal(start_date="2024-09-02")
        external = make_external(
            student_name="Alice  Smith",
            duration=60,
            subject_name="Violin",
            teacher_name="Mr. Park",
            start_date="2024-10-01",
        )

        differences = find_differences(internal, external)

        assert [d.split(" mismatch")[0] for d in differences] == [
            "Student name",
            "Duration",
            "Subject",
            "Teacher",
            "Start date",
        ]
