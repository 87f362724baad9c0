import logging
import subprocess
import sys
from collections.abc import Iterable, Iterator

from attrs import define, field

from configuration.types import RestakeConfiguration

from .balance import ETH_DECIMALS, Balance, is_eth_chain
from .classifier import (
    ChainState,
    LineKind,
    classify,
    extract_field,
    extract_int,
    strip_ansi,
    strip_timestamp,
)
from .notification import send_report
from .report import GREEN_CIRCLE, RED_CIRCLE, WARNING_SIGN, Report

LOGGER = logging.getLogger(__name__)

NPM_COMMAND = ["npm", "run", "autostake"]
JOURNAL_COMMAND = [
    "journalctl",
    "-u",
    "restake",
    "--since",
    "today",
    "-o",
    "cat",
    "--no-pager",
]


def format_balance(line: str, chain: str | None, config: RestakeConfiguration) -> str:
    amount = extract_int(line, "amount")
    denom = extract_field(line, "denom")

    if amount is None or denom is None:
        LOGGER.warning(f"unable to read bot balance from: {line}")
        return "Bot balance is <b>unknown</b>"

    balance = Balance(amount, denom)
    if is_eth_chain(chain, config.eth_chains):
        balance = Balance(amount, denom, ETH_DECIMALS)

    message = f"Bot balance is <b>{balance}</b>"
    if balance.is_below(config.balance_alert):
        message += f" {WARNING_SIGN}"
    return message


def format_tx_failure(line: str) -> str:
    fields = line.split(";")
    second = fields[1][1:] if len(fields) > 1 else ""
    third = fields[2] if len(fields) > 2 else ""
    return f"<pre>{second} {third}</pre>"


def format_error(line: str) -> str:
    clean = strip_ansi(line)
    return f"Failed with error: {clean.split('Failed with error: ', 1)[-1]}"


@define
class RestakeMonitor:
    config: RestakeConfiguration
    report: Report = field(factory=Report)
    state: ChainState = field(factory=ChainState)

    def process_line(self, raw: str) -> LineKind | None:
        line = strip_timestamp(raw)
        kind = classify(line, self.state)
        if kind is None:
            return None

        state = self.state
        report = self.report
        record = report.current_record

        match kind:
            case LineKind.CHAIN_LOADED:
                chain = extract_field(line, "prettyName") or "unknown"
                self.state = ChainState.loaded(chain)
                report.add_record(chain)
                report.add(f"\nLoaded <b>{chain}</b>")

            case LineKind.NOT_OPERATOR:
                if record is not None:
                    record.authorized = False
                report.add(line)

            case LineKind.BALANCE_FETCHED:
                report.add(format_balance(line, state.chain, self.config))

            case LineKind.DELEGATORS_FOUND:
                count = extract_int(line, "count")
                if count is None:
                    LOGGER.warning(f"unable to read delegator count from: {line}")
                if record is not None:
                    record.delegators = count
                    record.reported = True
                shown = count if count is not None else "unknown"
                report.add(f"Found {shown} addresses with valid grants...")
                state.delegators_reported = True

            case LineKind.ATTEMPT_FAILED:
                state.attempt = 2

            case LineKind.AUTOSTAKE_COMPLETED:
                report.add(f"Autostake completed after {state.attempt or 1} attempt(s)")

            case LineKind.AUTOSTAKE_FINISHED:
                state.attempt = None
                report.add("Autostake finished")
                report.add(f"{GREEN_CIRCLE} Autostake <b>{state.chain}</b> finished")

            case LineKind.AUTOSTAKE_FAILED_AFTER:
                pass

            case LineKind.AUTOSTAKE_FAILED:
                state.attempt = None
                report.add(f"{RED_CIRCLE} Autostake <b>{state.chain}</b> failed")

            case LineKind.TX_FAILED:
                state.tx_reported = True
                report.add(format_tx_failure(line))

            case LineKind.ERROR:
                state.tx_reported = True
                report.add(format_error(line))

        return kind

    def consume(self, lines: Iterable[str]) -> Report:
        for raw in lines:
            self.process_line(raw.rstrip("\n"))
        return self.report


def command_lines(command: list[str], cwd: str | None = None) -> Iterator[str]:
    LOGGER.info(f"reading output of {' '.join(command)}")
    try:
        process = subprocess.Popen(
            command,
            cwd=cwd,
            stdout=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as e:
        # report is still sent, it will say that there were no logs
        LOGGER.error(f"unable to start {command[0]}: {e}")
        return

    with process:
        assert process.stdout is not None
        yield from process.stdout

    if process.returncode:
        LOGGER.warning(f"{command[0]} exited with status {process.returncode}")


def source_lines(config: RestakeConfiguration) -> Iterable[str]:
    match config.source:
        case "npm":
            return command_lines(NPM_COMMAND, cwd=config.restake_dir)
        case "journal":
            return command_lines(JOURNAL_COMMAND)
        case "stdin":
            return sys.stdin
        case x:
            raise ValueError(f"Unexpected restake source {x}")


def run(config: RestakeConfiguration, lines: Iterable[str] | None = None) -> str:
    if lines is None:
        lines = source_lines(config)

    report = RestakeMonitor(config).consume(lines)
    message = report.build_str()
    send_report(config.notification, message)

    return message
