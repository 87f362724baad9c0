import enum
import re

from attrs import define


class LineKind(enum.Enum):
    CHAIN_LOADED = "Loaded chain"
    NOT_OPERATOR = "Not an operator"
    BALANCE_FETCHED = "Fetched bot balance"
    DELEGATORS_FOUND = "Found addresses with valid grants"
    ATTEMPT_FAILED = "Failed attempt"
    AUTOSTAKE_COMPLETED = "Autostake completed"
    AUTOSTAKE_FINISHED = "Autostake finished"
    AUTOSTAKE_FAILED_AFTER = "Autostake failed after"
    AUTOSTAKE_FAILED = "Autostake failed"
    TX_FAILED = "TX 1: Failed"
    ERROR = "Failed with error"


@define
class ChainState:
    chain: str = ""
    attempt: int | None = None
    tx_reported: bool = False
    delegators_reported: bool = False

    @classmethod
    def loaded(cls, chain: str) -> "ChainState":
        return cls(chain=chain, attempt=1)

    def accepts(self, kind: LineKind) -> bool:
        match kind:
            case LineKind.CHAIN_LOADED:
                return self.attempt is None
            case LineKind.NOT_OPERATOR | LineKind.BALANCE_FETCHED:
                return self.attempt == 1
            case LineKind.DELEGATORS_FOUND:
                return not self.delegators_reported
            case LineKind.TX_FAILED | LineKind.ERROR:
                return not self.tx_reported
            case _:
                return True


# ordered by priority, first match wins
PATTERNS = list(LineKind)

ANSI_ESCAPE = re.compile(r"\x1b?\[[0-9;]*m")


def strip_timestamp(line: str) -> str:
    return " ".join(line.split()[1:])


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE.sub("", text)


def classify(line: str, state: ChainState) -> LineKind | None:
    # first pattern found whose guard holds
    for kind in PATTERNS:
        if kind.value not in line:
            continue
        if state.accepts(kind):
            return kind
    return None


def extract_field(line: str, name: str, pattern: str = r"\S+") -> str | None:
    m = re.search(rf"(?:^|\s){re.escape(name)}=({pattern})", line)
    if m is None or not m.group(1):
        return None
    return m.group(1)


def extract_int(line: str, name: str) -> int | None:
    value = extract_field(line, name, r"\d+")
    return int(value) if value is not None else None
