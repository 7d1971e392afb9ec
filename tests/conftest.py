"""
Shared fixtures for the rpc_codegen test suite.

Run with: python -m pytest tests/ -v --tb=short
"""

import importlib
import sys
from pathlib import Path

import pytest

from rpc_codegen.type_table import default_type_table

SAMPLE_HELP = """\
== Blockchain ==
getblockchaininfo
Returns an object containing various state info regarding blockchain processing.

Result:
{                                         (json object)
  "chain" : "str",                        (string) current network name (main, test, signet, regtest)
  "blocks" : n,                           (numeric) the height of the most-work fully-validated chain
  "softforks" : {                         (json object) status of softforks
    "taproot" : {                         (json object) name of the softfork
      "active" : true|false,              (boolean) true if the rules are enforced
    },
  },
  "warnings" : "str"                      (string) any network and blockchain warnings
}

Examples:
> bitcoin-cli getblockchaininfo

getblockcount
Returns the height of the most-work fully-validated chain.
The genesis block has height 0.

Result:
n    (numeric) The current block count

Examples:
> bitcoin-cli getblockcount

getblockhash height
Returns hash of block in best-block-chain at height provided.

Arguments:
1. height    (numeric, required) The height index

Result:
hex    (string) The block hash

== Mempool ==
getmempoolsummary
Returns a summary of the mempool.

Result:
"size" : n,                (numeric) Current tx count
"total_fee" : x.x,         (numeric) Total fees in BTC
"loaded" : true|false,     (boolean) True if the initial load attempt has completed
"note" : "str",            (string) Only present if the mempool is full

== Network ==
ping
Requests that a ping be sent to all other nodes.

Result:
null    (json null)

setmocktime timestamp
Set the local time to given timestamp (-regtest only)

Arguments:
1. timestamp    (numeric, required) Unix seconds-since-epoch timestamp

== Wallet ==
sendtoaddress "address" amount ( "comment" "comment_to" subtractfeefromamount replaceable conf_target "estimate_mode" avoid_reuse fee_rate )
Send an amount to a given address.

Arguments:
1. address                  (string, required) The bitcoin address to send to.
2. amount                   (numeric or string, required) The amount in BTC to send. eg 0.1
3. comment                  (string, optional) A comment used to store what the transaction is for.
4. comment_to               (string, optional) A comment to store the name of the person or organization
5. subtractfeefromamount    (boolean, optional, default=false) The fee will be deducted from the amount being sent.
6. replaceable              (boolean, optional, default=wallet default) Signal that this transaction can be replaced
7. conf_target              (numeric, optional, default=wallet -txconfirmtarget) Confirmation target in blocks
8. estimate_mode            (string, optional, default="unset") The fee estimate mode
9. avoid_reuse              (boolean, optional, default=true) Avoid spending from dirty addresses
10. fee_rate                (numeric or string, optional, default=not set) Specify a fee rate in sat/vB.

Result:
txid    (string) The transaction id, hex-encoded.
"""


@pytest.fixture
def sample_help() -> str:
    return SAMPLE_HELP


@pytest.fixture
def table():
    return default_type_table()


@pytest.fixture
def import_generated(tmp_path):
    """Write generated files under tmp_path and import one of the version packages."""
    added = []

    def _import(files, package: str = "v29"):
        root = tmp_path / "generated"
        for generated in files:
            path = root / generated.file_name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(generated.source, encoding="utf-8")
        sys.path.insert(0, str(root))
        added.append(str(root))
        importlib.invalidate_caches()
        return {
            "package": importlib.import_module(package),
            "client": importlib.import_module(f"{package}.client"),
            "responses": importlib.import_module(f"{package}.responses"),
            "batch": importlib.import_module(f"{package}.batch"),
        }

    yield _import

    for path in added:
        if path in sys.path:
            sys.path.remove(path)
    for name in list(sys.modules):
        if name.split(".")[0].startswith("v") and name.split(".")[0][1:2].isdigit():
            del sys.modules[name]


class FakeTransport:
    """Records calls and answers from a canned {method: result} mapping."""

    def __init__(self, answers=None):
        self.answers = dict(answers or {})
        self.calls = []

    def __call__(self, method, params):
        self.calls.append((method, params))
        return self.answers.get(method)


@pytest.fixture
def fake_transport():
    return FakeTransport
