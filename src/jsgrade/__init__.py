"""Static structural grader for single-file JavaScript submissions."""
