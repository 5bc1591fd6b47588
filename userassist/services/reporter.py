"""Per-user usage comparison report."""

from collections.abc import Iterable

from pydantic import BaseModel, Field

from userassist.config import get_settings
from userassist.models.record import ArtifactRecord

REPORT_TITLE = "=== UserAssist Usage Comparison ==="


class RankedEntry(BaseModel):
    """One line of an owner's top-executed list."""

    rank: int = Field(ge=1)
    decoded_name: str
    run_count: int = Field(ge=0)


class OwnerUsage(BaseModel):
    """Usage summary for one owner identity."""

    owner_identity: str
    entry_count: int = Field(ge=0)
    top_entries: list[RankedEntry] = Field(default_factory=list)


class UsageReport(BaseModel):
    """Usage summaries for every owner identity in a record set."""

    owners: list[OwnerUsage] = Field(default_factory=list)

    def get(self, owner_identity: str) -> OwnerUsage | None:
        for owner in self.owners:
            if owner.owner_identity == owner_identity:
                return owner
        return None


def build_usage_report(records: Iterable[ArtifactRecord], top_n: int | None = None) -> UsageReport:
    """Group records by owner and rank each group by run count.

    Ranking is a stable sort on run count, descending, so equal counts keep
    their collection order. Owners are listed alphabetically.
    """
    if top_n is None:
        top_n = get_settings().report_top_n

    groups: dict[str, list[ArtifactRecord]] = {}
    for record in records:
        groups.setdefault(record.owner_identity, []).append(record)

    owners = []
    for owner_identity in sorted(groups):
        entries = groups[owner_identity]
        ranked = sorted(entries, key=lambda r: r.run_count, reverse=True)
        owners.append(
            OwnerUsage(
                owner_identity=owner_identity,
                entry_count=len(entries),
                top_entries=[
                    RankedEntry(rank=i, decoded_name=r.decoded_name, run_count=r.run_count)
                    for i, r in enumerate(ranked[: max(top_n, 0)], start=1)
                ],
            )
        )

    return UsageReport(owners=owners)


def render_usage_report(report: UsageReport) -> str:
    """Render the comparison report as a plain-text block."""
    lines = [REPORT_TITLE, ""]
    for owner in report.owners:
        lines.append(f"User: {owner.owner_identity}")
        lines.append(f"  Applications: {owner.entry_count}")
        lines.append(f"  Top {len(owner.top_entries)} executions:")
        for entry in owner.top_entries:
            lines.append(f"    {entry.rank}. {entry.decoded_name} ({entry.run_count} times)")
        lines.append("")
    return "\n".join(lines)
