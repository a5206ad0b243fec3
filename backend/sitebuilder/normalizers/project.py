# sitebuilder/normalizers/project.py
from typing import Any, Dict


def normalize_catalogue_entry(entry: Dict[str, Any]) -> Dict[str, Any]:
    """Catalogue listing row: id, name and the project-level metadata only."""
    metadata = dict(entry.get("metadata") or {})
    # lastDeployment stays; full history is served by /deployments
    metadata.pop("deploymentHistory", None)

    return {
        "id": entry["id"],
        "name": entry.get("name", ""),
        "metadata": metadata,
    }
