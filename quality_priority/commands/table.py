from __future__ import annotations

import json

from ..priority_table import PriorityTable


def run(table: PriorityTable, *, wanted_only: bool = False, json_output: bool = False) -> None:
    entries = [entry for entry in table.entries if entry.wanted or not wanted_only]
    entries.sort(key=lambda entry: -entry.total)
    if json_output:
        payload = [
            {"names": list(entry.names), "total": entry.total, "wanted": entry.wanted}
            for entry in entries
        ]
        print(json.dumps(payload, indent=2))
        return
    print(f"Priority table for {table.profile_name} ({len(entries)} entries)")
    for entry in entries:
        label = "_".join(name or "-" for name in entry.names)
        flag = "" if entry.wanted else " (unwanted)"
        print(f"{entry.total:>8}  {label}{flag}")
