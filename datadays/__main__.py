import argparse
import logging

from . import config
from .pipeline import DAYS, day_title, run_all
from .report import save_report_pdf, summarize_result
from .utils import output_dirs


def main(argv=None):
    parser = argparse.ArgumentParser(description="Five-day data cleaning walkthrough")
    parser.add_argument("days", nargs="*", type=int, help=f"days to run (default: all of {sorted(DAYS)})")
    parser.add_argument("--data-dir", default=str(config.DATA_DIR), help="where the sample datasets live")
    parser.add_argument("--output-dir", default=str(config.OUTPUT_DIR), help="where results are written")
    parser.add_argument("--pdf", action="store_true", help="also write a PDF report")
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format=config.LOG_FORMAT, datefmt=config.LOG_DATEFMT)
    log = logging.getLogger("datadays")

    for day in args.days:
        if day not in DAYS:
            parser.error(f"no exercise for day {day}; days are {sorted(DAYS)}")

    base, _ = output_dirs(args.output_dir)
    results = run_all(args.data_dir, output_dir=base, days=args.days or None)

    sections, images = [], []
    for day, result in results.items():
        text = summarize_result(day, result, day_title(day))
        print(text)
        print()
        sections.append(text)
        images += result.get("plot_paths", [])

    if args.pdf:
        pdf_path = save_report_pdf("\n\n".join(sections), images, base / "walkthrough.pdf")
        log.info("wrote %s", pdf_path)


if __name__ == "__main__":
    main()
