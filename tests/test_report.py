from datadays import duplicates, report


def test_summary_for_deduplication(samples, out_dir):
    result = duplicates.run(samples[4]["csv"], ["student_id", "course"], output_dir=out_dir)
    text = report.summarize_result(4, result, "Removing duplicate records")
    assert text.startswith("Day 4: Removing duplicate records")
    assert "Duplicate rows: 1" in text
    assert "deduplicated.csv" in text


def test_pdf_report(tmp_path, samples, out_dir):
    from datadays import outliers

    result = outliers.run(samples[3]["csv"], column="minutes", output_dir=out_dir)
    text = report.summarize_result(3, result)
    pdf = report.save_report_pdf(text + "\n" + "x" * 300, result["plot_paths"], tmp_path / "r.pdf")
    assert pdf.read_bytes().startswith(b"%PDF")


def test_summary_for_every_sheet(samples):
    from datadays import ingest

    result = ingest.run(samples[1]["json"], samples[1]["spreadsheet"], sheet_name=None)
    text = report.summarize_result(1, result)
    assert "Sheet: stations" in text
    assert "Sheet: readings" in text
    assert "Shape: 6 rows x 3 columns" in text
