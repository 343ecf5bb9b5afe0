# datadays/ui.py
import logging
from pathlib import Path
from typing import Optional

import gradio as gr
import pandas as pd

from .api import day_arguments
from .pipeline import DAYS, run_day
from .report import summarize_result
from .utils import output_dirs

log = logging.getLogger("datadays.ui")


def _number(text) -> Optional[float]:
    if text is None or str(text).strip() == "":
        return None
    return float(text)


def run_wrapper(file_path, sheet_path, day, keys, columns, column, threshold, strategy, drop_threshold,
                output_dir: Optional[Path] = None):
    """Run one day from the UI; returns summary text, plots, a result preview and the written file."""
    if file_path is None:
        return "Upload a file first.", [], None, None
    day = int(day)
    paths = [Path(p) for p in (file_path, sheet_path) if p]
    base, _ = output_dirs(output_dir)
    try:
        kwargs = day_arguments(day, paths, keys=keys, columns=columns, column=column or None,
                               threshold=_number(threshold), strategy=strategy,
                               drop_threshold=_number(drop_threshold), output_dir=base)
        result = run_day(day, **kwargs)
    except (ValueError, KeyError) as e:
        log.info("day %d failed: %s", day, e)
        return f"Day {day} failed: {e}", [], None, None

    preview = result.get("cleaned", result.get("json"))
    if isinstance(preview, pd.DataFrame):
        preview = preview.head(20).reset_index(drop=True)
    else:
        preview = None
    return (summarize_result(day, result, DAYS[day][0]), result.get("plot_paths", []), preview,
            result.get("output_path"))


def build_gradio_app():
    with gr.Blocks(title="datadays: five-day data cleaning") as demo:
        with gr.Row():
            with gr.Column(scale=1, min_width=240):
                gr.Markdown("## datadays\nPick a day, upload its file and run the exercise.")
                day_input = gr.Dropdown(choices=[(f"Day {d}: {t}", str(d)) for d, (t, _) in sorted(DAYS.items())],
                                        value="1", label="Day")
                upload_file = gr.File(label="Data file (CSV, JSON or spreadsheet)", file_count="single",
                                      type="filepath")
                sheet_file = gr.File(label="Spreadsheet (day 1 only)", file_count="single", type="filepath")
                keys_input = gr.Textbox(label="Key columns (day 4)", placeholder="e.g. student_id,course")
                columns_input = gr.Textbox(label="Columns to parse (day 5)", placeholder="e.g. price,size")
                column_input = gr.Textbox(label="Column to score (day 3, optional)")
                threshold_input = gr.Textbox(label="z-score threshold (day 3)", placeholder="3")
                strategy_input = gr.Radio(choices=["separate", "drop", "mean"], value="separate",
                                          label="Outlier strategy (day 3)")
                drop_threshold_input = gr.Textbox(label="Drop columns missing more than (day 2)",
                                                  placeholder="e.g. 0.5")
                run_btn = gr.Button("Run", variant="primary")
            with gr.Column(scale=3):
                summary_text = gr.Textbox(label="Summary", lines=24)
                plot_gallery = gr.Gallery(label="Plots", columns=2)
                df_preview = gr.Dataframe(label="Result preview")
                output_file = gr.File(label="Written file (day 4)")

        run_btn.click(
            fn=run_wrapper,
            inputs=[upload_file, sheet_file, day_input, keys_input, columns_input, column_input,
                    threshold_input, strategy_input, drop_threshold_input],
            outputs=[summary_text, plot_gallery, df_preview, output_file],
        )
    return demo
