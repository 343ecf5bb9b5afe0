# datadays/report.py
from pathlib import Path

import pandas as pd
from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .utils import describe_structure, format_structure


def _day1(result: dict) -> list:
    lines = [format_structure(result["json_structure"], "JSON file")]
    if result["nested_columns"]:
        lines.append(f"Columns still holding lists/objects: {result['nested_columns']}")
    lines += ["", f"Sheets: {result['sheets']}"]
    if isinstance(result["spreadsheet"], dict):
        for name, structure in result["spreadsheet_structure"].items():
            lines += ["", format_structure(structure, f"Sheet: {name}")]
    else:
        lines += ["", format_structure(result["spreadsheet_structure"], "Spreadsheet")]
    return lines


def _day2(result: dict) -> list:
    imp = result["imputation"]
    return [
        f"Missing before: {result['missing_pct_before']:.2f}% of all cells",
        result["missing_before"].to_string(),
        "",
        f"Multiple imputation: m={imp.m} over {imp.columns}",
        "Between-imputation variance of imputed cells:",
        imp.between_variance.round(4).to_string(),
        "",
        "Missing after pooling:",
        result["missing_after"].to_string(),
    ]


def _day3(result: dict) -> list:
    lines = [f"z-score threshold: +/-{result['threshold']}", "Outliers per column:"]
    lines += [f"  {col}: {n}" for col, n in result["outlier_counts"].items()]
    lines.append(f"Strategy: {result['strategy']}")
    lines.append(f"Rows before: {len(result['frame'])}, after: {len(result['cleaned'])}")
    if "outliers" in result:
        lines += ["", "Separated rows:", result["outliers"].to_string() if len(result["outliers"]) else "(none)"]
    return lines


def _day4(result: dict) -> list:
    lines = [f"Keys: {result['keys']}",
             f"Duplicate rows: {result['duplicate_count']}",
             f"Rows before: {len(result['frame'])}, after: {len(result['cleaned'])}"]
    if result["duplicate_count"]:
        lines += ["", result["duplicates"].to_string()]
    lines += ["", f"Wrote {result['output_path']}"]
    return lines


def _day5(result: dict) -> list:
    cols = result["columns"]
    side_by_side = pd.concat(
        [result["frame"][cols].add_suffix(" (raw)"), result["cleaned"][cols].add_suffix(" (parsed)")], axis=1
    )
    lines = [side_by_side.head(10).to_string(), "", result["described"].to_string()]
    for col, problems in result["problems"].items():
        lines += ["", f"Could not parse {len(problems)} values in {col}:", problems.to_string(index=False)]
    return lines


_SECTIONS = {1: _day1, 2: _day2, 3: _day3, 4: _day4, 5: _day5}


def summarize_result(day: int, result: dict, title: str = "") -> str:
    heading = f"Day {day}" + (f": {title}" if title else "")
    lines = [heading, "=" * len(heading)]
    lines += _SECTIONS[day](result)
    if "cleaned" in result and day != 4:
        lines += ["", format_structure(describe_structure(result["cleaned"]), "Result")]
    return "\n".join(lines)


# ---------------- PDF generation (embed images) ----------------
def save_report_pdf(text: str, image_paths: list, pdf_path: Path, title: str = "Data cleaning report"):
    c = canvas.Canvas(str(pdf_path), pagesize=letter)
    width, height = letter
    margin = 40
    y = height - margin

    c.setFont("Helvetica-Bold", 14)
    c.drawString(margin, y, title)
    y -= 24

    c.setFont("Courier", 8)
    for line in text.splitlines():
        if y < 60:
            c.showPage()
            y = height - margin
            c.setFont("Courier", 8)
        # wrap
        while len(line) > 110:
            c.drawString(margin, y, line[:110])
            line = line[110:]
            y -= 10
            if y < 60:
                c.showPage()
                y = height - margin
                c.setFont("Courier", 8)
        c.drawString(margin, y, line)
        y -= 10

    # plots on their own pages, scaled to the page width
    for img_path in image_paths:
        c.showPage()
        img = ImageReader(str(img_path))
        iw, ih = img.getSize()
        scale = min(1.0, (width - 2 * margin) / iw)
        w, h = iw * scale, ih * scale
        c.drawImage(img, margin, height - margin - h, width=w, height=h)
    c.save()
    return Path(pdf_path)
