"""
P&ID analysis resources: projects, diagrams, analysis results and sessions.

Same shape as ``edrs.services``: one thin class per resource over
``ApiClient``, returning decoded JSON. Diagram upload is multipart and is
not wrapped here.
"""

from __future__ import annotations

from typing import Any, Optional

from edrs.services import _json, _Service

PROJECT_TYPE_LABELS = {
    "upstream": "Upstream (E&P)",
    "midstream": "Midstream (Transportation)",
    "downstream": "Downstream (Refining)",
    "petrochemical": "Petrochemical",
    "lng": "LNG Processing",
    "offshore": "Offshore Platform",
    "onshore": "Onshore Facility",
}

STANDARD_LABELS = {
    "isa_5_1": "ISA-5.1 (Instrumentation)",
    "iso_10628": "ISO 10628 (Process Diagrams)",
    "iec_62424": "IEC 62424 (Process Control)",
    "api_14c": "API 14C (Subsurface Safety)",
    "asme_y14": "ASME Y14 (Engineering Drawing)",
}

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


class ProjectService(_Service):
    def list(self, params: Optional[dict] = None) -> Any:
        return _json(self.client.get("/projects/", params=params or {}))

    def get(self, project_id) -> Any:
        return _json(self.client.get(f"/projects/{project_id}/"))

    def create(self, data: dict) -> Any:
        return _json(self.client.post("/projects/", json=data))

    def update(self, project_id, data: dict) -> Any:
        return _json(self.client.put(f"/projects/{project_id}/", json=data))

    def delete(self, project_id) -> Any:
        return _json(self.client.delete(f"/projects/{project_id}/"))

    def stats(self, project_id) -> Any:
        return _json(self.client.get(f"/projects/{project_id}/stats/"))


class DiagramService(_Service):
    """Diagrams nested under a project."""

    def _path(self, project_id, diagram_id=None) -> str:
        if diagram_id is None:
            return f"/projects/{project_id}/diagrams/"
        return f"/projects/{project_id}/diagrams/{diagram_id}/"

    def list(self, project_id, params: Optional[dict] = None) -> Any:
        return _json(self.client.get(self._path(project_id), params=params or {}))

    def get(self, project_id, diagram_id) -> Any:
        return _json(self.client.get(self._path(project_id, diagram_id)))

    def update(self, project_id, diagram_id, data: dict) -> Any:
        return _json(self.client.put(self._path(project_id, diagram_id), json=data))

    def delete(self, project_id, diagram_id) -> Any:
        return _json(self.client.delete(self._path(project_id, diagram_id)))

    def start_analysis(self, project_id, diagram_id, config: Optional[dict] = None) -> Any:
        return _json(
            self.client.post(f"{self._path(project_id, diagram_id)}analyze/", json=config or {})
        )


class AnalysisResultService(_Service):
    def _path(self, project_id, diagram_id, suffix: str = "") -> str:
        return f"/projects/{project_id}/diagrams/{diagram_id}/results/{suffix}"

    def list(self, project_id, diagram_id, params: Optional[dict] = None) -> Any:
        return _json(self.client.get(self._path(project_id, diagram_id), params=params or {}))

    def get(self, project_id, diagram_id, result_id) -> Any:
        return _json(self.client.get(self._path(project_id, diagram_id, f"{result_id}/")))

    def update(self, project_id, diagram_id, result_id, data: dict) -> Any:
        return _json(
            self.client.put(self._path(project_id, diagram_id, f"{result_id}/"), json=data)
        )

    def bulk_update(self, project_id, diagram_id, updates) -> Any:
        return _json(
            self.client.post(self._path(project_id, diagram_id, "bulk-update/"), json=updates)
        )

    def export(self, project_id, diagram_id, format: str = "pdf") -> bytes:
        """Download the rendered report as raw bytes."""
        response = self.client.get(
            self._path(project_id, diagram_id, "export/"), params={"format": format}
        )
        return response.content


class AnalysisSessionService(_Service):
    def list(self, params: Optional[dict] = None) -> Any:
        return _json(self.client.get("/sessions/", params=params or {}))

    def get(self, session_id) -> Any:
        return _json(self.client.get(f"/sessions/{session_id}/"))

    def progress(self, session_id) -> Any:
        return _json(self.client.get(f"/sessions/{session_id}/progress/"))

    def cancel(self, session_id) -> Any:
        return _json(self.client.post(f"/sessions/{session_id}/cancel/"))


class ErrorCategoryService(_Service):
    def list(self) -> Any:
        return _json(self.client.get("/error-categories/"))

    def create(self, data: dict) -> Any:
        return _json(self.client.post("/error-categories/", json=data))


def format_file_size(size: int) -> str:
    """1536 -> '1.5 KB'. Sizes past the GB range stay in GB."""
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    index = 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[index]}"


def project_type_label(project_type: str) -> str:
    return PROJECT_TYPE_LABELS.get(project_type, project_type)


def standard_label(standard: str) -> str:
    return STANDARD_LABELS.get(standard, standard)
