import logging
from functools import partial

import gradio as gr

from archive_explorer import settings
from archive_explorer.handlers_explorer import (
    describe_search,
    handle_archive_upload,
    handle_file_selection,
    update_column_choices,
    visible_tree,
)
from archive_explorer.handlers_table import (
    export_table_handler,
    handle_add_filter,
    handle_clear_filters,
    handle_items_per_page,
    handle_next_page,
    handle_page_change,
    handle_previous_page,
    handle_remove_filter,
    handle_search_change,
    handle_sort,
    handle_visible_columns,
)
from archive_explorer.query import OPERATOR_LABELS

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# --- UI Definition ---
with gr.Blocks(title="Archive Explorer") as demo:
    gr.Markdown("# Nested Folder Viewer")
    gr.Markdown("Upload a ZIP archive to explore its folders, CSV tables and PDF documents.")

    # State
    tree_state = gr.State()
    selected_path_state = gr.State()
    table_data_state = gr.State()
    query_state = gr.State()

    with gr.Row():
        # Left Panel: Upload & Explorer
        with gr.Column(scale=1):
            gr.Markdown("### 1. Upload")
            archive_input = gr.File(label="Upload ZIP Archive", file_types=[".zip"])
            modified_by_input = gr.Textbox(label="Uploader", value=settings.DEFAULT_MODIFIED_BY)
            upload_status = gr.Textbox(label="Status", interactive=False)
            tree_summary = gr.Textbox(label="Contents", interactive=False)

            gr.Markdown("### 2. Explore")
            tree_search = gr.Textbox(label="Search files and folders", placeholder="Search...")
            tree_sort = gr.Radio(
                choices=[("Name (A-Z)", "name"), ("Date Created", "createdAt")],
                value="name",
                label="Sort by",
            )
            search_summary = gr.Textbox(label="Files", interactive=False)

            @gr.render(inputs=[tree_state, tree_search, tree_sort])
            def render_tree(tree, query, sort_key):
                if tree is None:
                    gr.Markdown("No archive loaded.")
                    return

                shown = visible_tree(tree, query, sort_key)
                if shown is None:
                    gr.Markdown(f'No files found matching "{query}"')
                    return

                def recursive_ui(node):
                    if node.is_folder:
                        with gr.Accordion(node.name, open=bool(query)):
                            for child in node.children:
                                recursive_ui(child)
                    else:
                        btn = gr.Button(f"{node.name} ({node.file_type.upper()})", size="sm")
                        btn.click(fn=partial(lambda p: p, node.path), outputs=[selected_path_state])

                gr.Markdown(f"**{shown.name}**")
                for child in shown.children:
                    recursive_ui(child)

        # Right Panel: Viewer
        with gr.Column(scale=3):
            file_header = gr.Markdown("No file selected")
            viewer_status = gr.Textbox(label="Viewer Status", interactive=False)

            with gr.Column(visible=False) as pdf_panel:
                pdf_output = gr.File(label="PDF Document")

            with gr.Column(visible=False) as csv_panel:
                with gr.Row():
                    table_search = gr.Textbox(label="Search across all columns", placeholder="Search...")
                    row_summary = gr.Textbox(label="Rows", interactive=False)

                with gr.Accordion("Smart Filters", open=False):
                    with gr.Row():
                        filter_column = gr.Dropdown(label="Column", choices=[], interactive=True)
                        filter_operator = gr.Dropdown(
                            label="Operator",
                            choices=[(label, op) for op, label in OPERATOR_LABELS.items()],
                            value="contains",
                            interactive=True,
                        )
                        filter_value = gr.Textbox(label="Value")
                    with gr.Row():
                        add_filter_btn = gr.Button("Apply Filter", variant="primary")
                        remove_filter_btn = gr.Button("Remove Filter")
                        clear_filters_btn = gr.Button("Clear All")
                    filter_summary = gr.Markdown("No active filters.")

                with gr.Accordion("Columns", open=False):
                    column_visibility = gr.CheckboxGroup(label="Visible Columns", choices=[], interactive=True)

                with gr.Row():
                    sort_column = gr.Dropdown(label="Sort Column", choices=[], interactive=True)
                    sort_btn = gr.Button("Sort (toggle asc/desc)")

                data_table = gr.Dataframe(label="Data", interactive=False, wrap=True)

                with gr.Row():
                    prev_btn = gr.Button("Previous")
                    page_input = gr.Number(label="Page", value=1, precision=0, minimum=1)
                    next_btn = gr.Button("Next")
                    items_per_page = gr.Dropdown(
                        label="Rows per page",
                        choices=list(settings.PAGE_SIZE_CHOICES),
                        value=settings.DEFAULT_ITEMS_PER_PAGE,
                        interactive=True,
                    )

                export_btn = gr.Button("Export Filtered CSV", variant="primary")
                export_output = gr.File(label="Download Result")

    table_outputs = [query_state, data_table, row_summary, page_input, filter_summary]

    archive_input.upload(
        fn=handle_archive_upload,
        inputs=[archive_input, modified_by_input],
        outputs=[tree_state, upload_status, tree_summary, selected_path_state],
    )

    for trigger in (tree_state.change, tree_search.change, tree_sort.change):
        trigger(
            fn=describe_search,
            inputs=[tree_state, tree_search, tree_sort],
            outputs=[search_summary],
        )

    selected_path_state.change(
        fn=handle_file_selection,
        inputs=[tree_state, selected_path_state],
        outputs=[
            table_data_state,
            query_state,
            file_header,
            viewer_status,
            pdf_output,
            csv_panel,
            pdf_panel,
            column_visibility,
            data_table,
            row_summary,
            page_input,
            filter_summary,
            table_search,
            items_per_page,
            filter_value,
        ],
    ).then(
        fn=update_column_choices,
        inputs=[table_data_state],
        outputs=[filter_column, sort_column],
    )

    table_search.change(
        fn=handle_search_change,
        inputs=[table_data_state, query_state, table_search],
        outputs=table_outputs,
    )

    add_filter_btn.click(
        fn=handle_add_filter,
        inputs=[table_data_state, query_state, filter_column, filter_operator, filter_value],
        outputs=table_outputs,
    )

    remove_filter_btn.click(
        fn=handle_remove_filter,
        inputs=[table_data_state, query_state, filter_column],
        outputs=table_outputs,
    )

    clear_filters_btn.click(
        fn=handle_clear_filters,
        inputs=[table_data_state, query_state],
        outputs=table_outputs + [table_search],
    )

    sort_btn.click(
        fn=handle_sort,
        inputs=[table_data_state, query_state, sort_column],
        outputs=table_outputs,
    )

    items_per_page.change(
        fn=handle_items_per_page,
        inputs=[table_data_state, query_state, items_per_page],
        outputs=table_outputs,
    )

    page_input.submit(
        fn=handle_page_change,
        inputs=[table_data_state, query_state, page_input],
        outputs=table_outputs,
    )

    prev_btn.click(
        fn=handle_previous_page,
        inputs=[table_data_state, query_state],
        outputs=table_outputs,
    )

    next_btn.click(
        fn=handle_next_page,
        inputs=[table_data_state, query_state],
        outputs=table_outputs,
    )

    column_visibility.input(
        fn=handle_visible_columns,
        inputs=[table_data_state, query_state, column_visibility],
        outputs=table_outputs,
    )

    export_btn.click(
        fn=export_table_handler,
        inputs=[table_data_state, query_state],
        outputs=[export_output, viewer_status],
    )

if __name__ == "__main__":
    demo.launch()
