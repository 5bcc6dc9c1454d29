"""JSON output formatter for sourcesecure.

Serializes scan results with Pydantic, adding the computed exit code so
that consumers do not have to re-derive it.
"""

import json

from sourcesecure.core.models import ScanResult
from sourcesecure.core.report import exit_code_for
from sourcesecure.outputs import BaseOutput


class JsonOutput(BaseOutput):
    """Output formatter that serializes ScanResult to indented JSON.

    Example:
        formatter = JsonOutput()
        print(formatter.format(scan_result))
    """

    @property
    def name(self) -> str:
        return "json"

    def format(self, result: ScanResult) -> str:
        data = result.model_dump(mode="json")
        data["exit_code"] = exit_code_for(result.findings)
        return json.dumps(data, indent=2, ensure_ascii=False)
