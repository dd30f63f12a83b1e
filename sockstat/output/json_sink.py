from __future__ import annotations
import json
import sys
from typing import Any, Dict, Optional, TextIO
from sockstat.core.util import ensure_parent

def render_json(obj: Dict[str, Any]) -> str:
    """
    Serialize a snapshot (or any JSON-ready dict) as indented JSON.
    """
    return json.dumps(obj, indent=2, ensure_ascii=False)

class JsonSink:
    """
    Output sink for rendered reports.
    
    Writes to the given file (replacing its content) or to stdout when no
    path is set. Creates parent directories if they don't exist.
    """
    
    def __init__(self, path: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
        """
        Initialize sink with output file path.
        
        Args:
            path: File path for output, None for the stream
            stream: Stream used when path is None (default: sys.stdout)
        """
        self.path = path
        self.stream = stream
        if self.path:
            ensure_parent(self.path)

    def write(self, text: str) -> None:
        """
        Write one rendered report, newline terminated.
        
        Args:
            text: Rendered report (JSON or plain text)
        """
        if self.path:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(text + "\n")
        else:
            stream = self.stream or sys.stdout
            stream.write(text + "\n")
            stream.flush()
