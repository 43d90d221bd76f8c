"""randomorg_stub — in-process emulator of the RANDOM.ORG JSON-RPC endpoint."""

from randomorg_stub.server import INVOKE_PATH, create_app
from randomorg_stub.service import KeyAccount, StubService
from randomorg_stub.signing import Signer

__all__ = ["INVOKE_PATH", "KeyAccount", "Signer", "StubService", "create_app"]
