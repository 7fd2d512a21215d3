"""
Helpers for building snapshot directory trees in tests.
"""

import json
import os
from typing import Any, Dict, Union


def vm_document(name: str, size: str = "Standard_D2s_v3", **extra: Any) -> Dict[str, Any]:
    """Return a minimal exported virtual machine document."""
    document = {
        "id": f"/subscriptions/0000/resourceGroups/RG-Prod/providers/"
        f"Microsoft.Compute/virtualMachines/{name}",
        "name": name,
        "location": "westeurope",
        "hardwareProfile": {"vmSize": size},
        "storageProfile": {"dataDisks": [{"lun": 0, "diskSizeGB": 128}]},
    }
    document.update(extra)
    return document


def write_snapshot(root: str, files: Dict[str, Union[str, Dict, list]]) -> None:
    """
    Write a snapshot tree under ``root``.

    Keys are paths relative to the root ('vms/web01.json'); dict and list
    values are written as indented JSON, str values verbatim.
    """
    for relative_path, content in files.items():
        path = os.path.join(root, relative_path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            if isinstance(content, str):
                f.write(content)
            else:
                json.dump(content, f, indent=2)
