"""Static hint extraction from engine source text."""

from entschema.sdk.extractor import ExtractionResult, HintExtractor
from entschema.sdk.index import SdkIndex
from entschema.sdk.models import EntityLink, InheritEdge, SourceHint
from entschema.sdk.scan import ScanResult, export_scan, load_scan, scan_files, scan_tree

__all__ = [
    "EntityLink",
    "ExtractionResult",
    "HintExtractor",
    "InheritEdge",
    "ScanResult",
    "SdkIndex",
    "SourceHint",
    "export_scan",
    "load_scan",
    "scan_files",
    "scan_tree",
]
