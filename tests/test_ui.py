from datadays.ui import run_wrapper


def test_requires_upload():
    summary, plots, preview, written = run_wrapper(None, None, "4", "", "", "", "", "separate", "")
    assert summary == "Upload a file first."
    assert plots == [] and preview is None and written is None


def test_runs_a_day(samples, out_dir):
    summary, plots, preview, written = run_wrapper(
        str(samples[4]["csv"]), None, "4", "student_id,course", "", "", "", "separate", "", output_dir=out_dir
    )
    assert "Duplicate rows: 1" in summary
    assert len(preview) == 7
    assert written.endswith("deduplicated.csv")


def test_reports_errors(samples, out_dir):
    summary, *_ = run_wrapper(str(samples[3]["csv"]), None, "3", "", "", "minutes", "abc", "separate", "",
                              output_dir=out_dir)
    assert summary.startswith("Day 3 failed")
