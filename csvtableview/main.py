#!/usr/bin/env python3
import sys
import json
import logging
import argparse
from pathlib import Path

from .parsing.protocol import handle_initial_load, is_error_response
from .utils.config import ConfigurationError, PreviewSettings, ViewerConfig
from .utils.file_loader import FileAdmissionError, read_table_text
from .utils.project_constants import PROJECT_NAME, PROJECT_VERSION

logger = logging.getLogger(__name__)


def parse_args(args):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description=f'{PROJECT_NAME} - Read-only CSV/TSV previewer')
    parser.add_argument('files', nargs='*', help='CSV or TSV files to preview')
    parser.add_argument('--delimiter', '-d',
                        help="Delimiter: 'auto', a single character, '\\t' or 'tab'")
    parser.add_argument('--max-rows', '-n', type=int, help='Rows shown by the first load')
    parser.add_argument('--batch-size', '-b', type=int, help='Rows added per "Load More"')
    parser.add_argument('--print', '-p', action='store_true', dest='print_json',
                        help='Print the first load of each file as JSON instead of opening a window')
    parser.add_argument('--config-dir', help='Directory holding config.yaml')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {PROJECT_VERSION}')
    return parser.parse_args(args)


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def print_previews(files, settings: PreviewSettings) -> int:
    """Write one InitialLoad response per file to stdout; return the exit code"""
    exit_code = 0
    for file_name in files:
        path = Path(file_name)
        try:
            text = read_table_text(path)
        except (FileAdmissionError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            exit_code = 1
            continue

        response = handle_initial_load({
            'text': text,
            'configuredDelimiter': settings.delimiter,
            'maxRowsConfig': settings.max_rows,
        })
        if is_error_response(response):
            exit_code = 1
        response['fileName'] = path.name
        response['fileSize'] = path.stat().st_size
        print(json.dumps(response, ensure_ascii=False))
    return exit_code


def main(args=None):
    """Main entry point for CSV Table View"""
    if args is None:
        args = sys.argv[1:]

    args = parse_args(args)
    setup_logging(args.verbose)

    try:
        config = ViewerConfig(Path(args.config_dir) if args.config_dir else None)
        settings = PreviewSettings.from_config(
            config,
            delimiter=args.delimiter,
            max_rows=args.max_rows,
            batch_size=args.batch_size,
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.print_json:
        if not args.files:
            print("Error: --print requires at least one file", file=sys.stderr)
            return 2
        return print_previews(args.files, settings)

    from PyQt6.QtWidgets import QApplication
    from PyQt6.QtGui import QIcon

    from .widgets.csv_viewer import CsvPreviewWindow

    # Create Qt application if not already created
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv[:1])
        app.setApplicationName(PROJECT_NAME)
        app.setApplicationVersion(PROJECT_VERSION)
        app.setStyle('Fusion')
        app.setWindowIcon(QIcon.fromTheme('x-office-spreadsheet', QIcon.fromTheme('text-csv')))

    window = CsvPreviewWindow(settings)
    window.setWindowIcon(app.windowIcon())
    window.show()

    for file_name in args.files:
        window.open_preview(file_name)

    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
