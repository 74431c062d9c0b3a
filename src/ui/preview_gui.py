"""
DearPyGui preview window for CSV files read through the buffered readers.
Pick a file and a profile, then load the header and the first records.
"""
from pathlib import Path

import dearpygui.dearpygui as dpg

from common.config import load_runtime_config
from common.errors import BackendError
from ui.preview_backend import build_preview, preview_rows

TABLE_TAG = "preview_table"


def load_preview(path, profile, limit, progress_bar, log_window):
    try:
        dpg.set_value(log_window, f"Loading {path}...\n")
        dpg.set_value(progress_bar, 0.0)
        runtime = load_runtime_config(profile)
        preview = build_preview(Path(path), runtime, limit=limit)
        if dpg.does_item_exist(TABLE_TAG):
            dpg.delete_item(TABLE_TAG)
        with dpg.table(tag=TABLE_TAG, parent="preview_window", header_row=True, resizable=True):
            for name in preview.header:
                dpg.add_table_column(label=name)
            for row in preview_rows(preview):
                with dpg.table_row():
                    for value in row:
                        dpg.add_text(value)
        fraction = preview.bytes_processed / preview.total_bytes if preview.total_bytes else 1.0
        dpg.set_value(progress_bar, min(1.0, fraction))
        more = " (more rows available)" if preview.truncated else ""
        dpg.set_value(
            log_window,
            dpg.get_value(log_window)
            + f"{len(preview.records)} record(s), {preview.bytes_processed} byte(s) read{more}\n",
        )
    except BackendError as e:
        dpg.set_value(log_window, dpg.get_value(log_window) + f"Error: {e}\n")
        dpg.set_value(progress_bar, 0.0)
        with dpg.window(label="Error", modal=True, no_close=False, width=400, height=120):
            dpg.add_text(f"An error occurred:\n{e}")
            dpg.add_button(label="Close", callback=lambda: dpg.delete_item(dpg.last_container()))


def main():
    dpg.create_context()
    dpg.create_viewport(title='CSV Preview', width=800, height=600)

    TEXT = {
        "input_file": "Select CSV file:",
        "profile": "Configuration profile:",
        "limit": "Rows to preview:",
        "load": "Load preview:",
    }

    with dpg.window(label="CSV Preview", tag="preview_window", width=780, height=580):
        dpg.add_text(TEXT["input_file"])
        input_file = dpg.add_input_text(label="File", width=500, hint="Path to a CSV/TSV file.")

        dpg.add_text(TEXT["profile"])
        profile = dpg.add_combo(items=["low_memory", "workstation"], default_value="low_memory", width=200)

        dpg.add_text(TEXT["limit"])
        limit = dpg.add_slider_int(label="Rows", default_value=50, min_value=1, max_value=1000, width=200)

        dpg.add_separator()
        dpg.add_text(TEXT["load"])
        progress_bar = dpg.add_progress_bar(label="Bytes read", default_value=0.0, width=500)
        log_window = dpg.add_input_text(label="Log", multiline=True, readonly=True, width=500, height=80, default_value="")
        dpg.add_button(label="Load", callback=lambda: load_preview(
            dpg.get_value(input_file),
            dpg.get_value(profile),
            dpg.get_value(limit),
            progress_bar,
            log_window,
        ))

    dpg.setup_dearpygui()
    dpg.show_viewport()
    dpg.start_dearpygui()
    dpg.destroy_context()


if __name__ == "__main__":
    main()
