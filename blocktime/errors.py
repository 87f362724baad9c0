class RpcError(Exception):
    pass


class FetchExhausted(RpcError):
    def __init__(self, url: str, attempts: int):
        super().__init__(f"failed to fetch data from {url} after {attempts} retries")


class MalformedResponse(RpcError):
    pass


class TimestampParseFailure(RpcError):
    pass


class NoEndpointAvailable(Exception):
    def __init__(self, candidates: list[str]):
        super().__init__(
            f"no available rpc endpoint found (tried {', '.join(candidates)})"
        )
        self.candidates = candidates


class InsufficientHistory(Exception):
    pass
