"""Export settings shared by the exporter components."""

from dataclasses import dataclass


@dataclass
class ExportSettings:
    """Switches controlling an export run."""

    export_folder: str = "Exports"
    # Keep the intermediate .docx and pandoc output next to each page
    debug: bool = False
    keep_onenote_temp_files: bool = False
    # Page XML pre-processing
    keep_html_highlighting: bool = False
    convert_hex_highlighting_to_yellow: bool = False
    # Markdown post-processing
    post_processing_md_img_ref: bool = True
    post_processing_remove_onenote_header: bool = True
    post_processing_remove_quotation_blocks: bool = True
    md_max_file_length: int = 50
    # Pause before retrying a page after OneNote stopped answering
    retry_delay_seconds: float = 10
    pandoc_path: str = "pandoc"
