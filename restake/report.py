import io
from datetime import datetime

from attrs import define, field

from .classifier import strip_ansi

MAILBOX = "\U0001f4eb"
GREEN_CIRCLE = "\U0001f7e2"
RED_CIRCLE = "\U0001f534"
WARNING_SIGN = "⚠"


@define
class StateRecord:
    chain: str
    delegators: int | None = None
    authorized: bool = True
    reported: bool = False

    def columns(self) -> tuple[str, str]:
        if not self.authorized:
            return f"{self.chain}:", "-"
        if not self.reported:
            return f"{self.chain}:", ""
        if self.delegators is None:
            return f"{self.chain}:", "unknown delegators"
        return f"{self.chain}:", f"{self.delegators} delegators"

    def __str__(self) -> str:
        return " ".join(c for c in self.columns() if c)


def format_table(records: list[StateRecord]) -> str:
    rows = [r.columns() for r in records]
    width = max(len(name) for name, _ in rows)
    return "\n".join(
        f"{name.ljust(width)}  {value}".rstrip() for name, value in rows
    )


@define
class Report:
    started: datetime = field(factory=lambda: datetime.now().astimezone())
    lines: list[str] = field(factory=list)
    records: list[StateRecord] = field(factory=list)

    def add(self, line: str) -> None:
        self.lines.append(line)

    def add_record(self, chain: str) -> None:
        self.records.append(StateRecord(chain))

    @property
    def current_record(self) -> StateRecord | None:
        return self.records[-1] if self.records else None

    def header(self) -> str:
        ts = self.started.strftime("%a %d %b %Y %H:%M:%S %Z")
        return f"{MAILBOX} <b>RESTAKE</b> | {ts}\n"

    def build_str(self) -> str:
        s = io.StringIO()

        s.write(self.header())
        s.write("\n")
        for line in self.lines:
            s.write(line)
            s.write("\n")

        s.seek(0)
        body = s.read().rstrip("\n")

        if self.records:
            tail = f"<pre>{format_table(self.records)}</pre>"
        else:
            tail = f"{RED_CIRCLE} No logs since today"

        return strip_ansi(f"{body}\n\n{tail}")
