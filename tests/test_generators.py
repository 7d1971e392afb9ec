"""
Tests for the code generators and the code they emit.

Generated packages are written to a temp directory and imported, then
driven through a fake transport.

Run with: python -m pytest tests/ -v --tb=short
"""

from decimal import Decimal

import pytest

from rpc_codegen.generators import (
    GENERATOR_REGISTRY,
    generator_names,
    get_generator,
    list_generators,
)
from rpc_codegen.generators.base import method_view, method_views, response_view
from rpc_codegen.naming import python_identifier, to_pascal_case, to_snake_case, unique_identifiers
from rpc_codegen.normalizer import load_document, normalize_document
from rpc_codegen.pipeline import generate_version
from rpc_codegen.versions import Version


def generate_all(methods, version=Version(29), table=None):
    return generate_version(methods, version, list_generators(table))


@pytest.fixture
def sample_methods(sample_help, table):
    return load_document(sample_help, table)


@pytest.fixture
def generated(sample_methods, import_generated):
    return import_generated(generate_all(sample_methods))


# ---- Registry -----------------------------------------------------------------

def test_registry_has_builtin_generators():
    assert list(generator_names()) == ["batch", "client", "responses"]
    assert set(GENERATOR_REGISTRY) == {"batch", "client", "responses"}


def test_unknown_generator():
    with pytest.raises(KeyError):
        get_generator("nope")


# ---- Naming -------------------------------------------------------------------

@pytest.mark.parametrize("name,expected", [
    ("blockHash", "block_hash"),
    ("fee-rate", "fee_rate"),
    ("conf_target", "conf_target"),
    ("__x__", "x"),
])
def test_snake_case(name, expected):
    assert to_snake_case(name) == expected


def test_pascal_case():
    assert to_pascal_case("getblockcount") == "Getblockcount"
    assert to_pascal_case("get_block_count") == "GetBlockCount"


@pytest.mark.parametrize("name,expected", [
    ("type", "type_"),
    ("class", "class_"),
    ("from_json", "from_json_"),
    ("2fa", "value_2fa"),
    ("", "value"),
    ("height", "height"),
    ("version", "version_"),
    ("_call", "call_"),
])
def test_python_identifier(name, expected):
    assert python_identifier(name) == expected


def test_unique_identifiers():
    assert unique_identifiers(["a", "a", "b", "a", "a_2"]) == ["a", "a_2", "b", "a_3", "a_2_2"]


# ---- View models --------------------------------------------------------------

def test_single_result_wraps_whole_value(sample_methods, table):
    count = next(m for m in sample_methods if m.name == "getblockcount")
    view = response_view(count, table)
    assert view.class_name == "GetblockcountResponse"
    assert [(f.ident, f.annotation, f.whole_value) for f in view.fields] == [("value", "float", True)]


def test_keyed_results_read_fields(sample_methods, table):
    summary = next(m for m in sample_methods if m.name == "getmempoolsummary")
    view = response_view(summary, table)
    assert [(f.ident, f.annotation) for f in view.fields] == [
        ("size", "int"),
        ("total_fee", "Decimal"),
        ("loaded", "bool"),
        ("note", "Optional[str]"),
    ]
    assert view.fields[1].expression == 'to_decimal(field_of(value, "total_fee"))'


def test_object_result_becomes_typed_fields(sample_methods, table):
    info = next(m for m in sample_methods if m.name == "getblockchaininfo")
    view = response_view(info, table)
    assert [(f.ident, f.annotation, f.whole_value) for f in view.fields] == [
        ("chain", "str", False),
        ("blocks", "int", False),
        ("softforks", "Dict[str, Any]", False),
        ("warnings", "str", False),
    ]
    assert view.fields[0].expression == 'field_of(value, "chain")'


def test_object_variants_merge_fields(table):
    doc = {"commands": {"getblockheader": [{"results": [
        {"type": "object", "key_name": "", "inner": [
            {"type": "hex", "key_name": "hash"},
            {"type": "numeric", "key_name": "height"},
        ]},
        {"type": "object", "key_name": "", "inner": [
            {"type": "hex", "key_name": "hash"},
            {"type": "string", "key_name": "height"},
            {"type": "numeric", "key_name": "nTx"},
        ]},
    ]}]}}
    (method,) = normalize_document(doc, table)
    view = response_view(method, table)
    assert [(f.ident, f.wire_key, f.annotation) for f in view.fields] == [
        ("hash", "hash", "str"),
        ("height", "height", "Any"),
        ("n_tx", "nTx", "Optional[float]"),
    ]


def test_void_methods_have_no_response(sample_methods, table):
    for name in ("ping", "setmocktime"):
        method = next(m for m in sample_methods if m.name == name)
        assert response_view(method, table) is None


def test_reserved_argument_names_are_escaped(table):
    doc = {"commands": {"listthings": [{
        "arguments": [
            {"names": ["type"], "type": "string", "optional": True},
            {"names": ["count"], "type": "numeric"},
        ],
        "results": [{"type": "array", "key_name": ""}],
    }]}}
    (method,) = normalize_document(doc, table)
    view = method_view(method, "listthings", table)
    assert [(p.ident, p.wire_name) for p in view.wire_params] == [("type_", "type"), ("count", "count")]
    assert view.signature == "self, count: int, type_: Optional[str] = None"
    assert view.pairs == '[("type", type_), ("count", count)]'


def test_method_views_are_sorted(sample_methods, table):
    names = [v.name for v in method_views(list(reversed(sample_methods)), table)]
    assert names == sorted(names)


# ---- Generated source ---------------------------------------------------------

def test_file_layout(sample_methods):
    files = generate_all(sample_methods)
    assert [f.file_name for f in files] == [
        "v29/__init__.py",
        "v29/_base.py",
        "v29/batch.py",
        "v29/client.py",
        "v29/responses.py",
    ]


def test_minor_version_layout(sample_methods):
    files = generate_all(sample_methods, Version(29, 1))
    assert all(f.file_name.startswith("v29_1/") for f in files)
    client = next(f for f in files if f.file_name == "v29_1/client.py")
    assert "class RpcClientV29_1:" in client.source
    assert "# RPC API version 29.1" in client.source


def test_generated_files_compile(sample_methods):
    for generated in generate_all(sample_methods):
        compile(generated.source, generated.file_name, "exec")


def test_generation_is_deterministic(sample_methods):
    first = generate_all(sample_methods)
    again = generate_all(sample_methods)
    reversed_input = generate_all(list(reversed(sample_methods)))
    assert first == again == reversed_input


def test_header_marks_files_as_generated(sample_methods):
    for generated in generate_all(sample_methods):
        assert generated.source.startswith("# This file is auto-generated by rpc-codegen. Do not edit manually.\n")


# ---- Generated client at runtime ----------------------------------------------

def test_client_decodes_single_value(generated, fake_transport):
    transport = fake_transport({"getblockcount": 812345})
    client = generated["package"].RpcClientV29(transport)
    response = client.getblockcount()
    assert response.value == 812345
    assert transport.calls == [("getblockcount", [])]
    assert client.version == "v29"


def test_client_decodes_keyed_fields(generated, fake_transport):
    transport = fake_transport({"getmempoolsummary": {"size": 3, "total_fee": 0.5, "loaded": True}})
    summary = generated["package"].RpcClientV29(transport).getmempoolsummary()
    assert summary.size == 3
    assert summary.total_fee == Decimal("0.5")
    assert summary.loaded is True
    assert summary.note is None


def test_client_decodes_object_fields(generated, fake_transport):
    answer = {
        "chain": "regtest",
        "blocks": 101,
        "softforks": {"taproot": {"active": True}},
        "warnings": "",
    }
    info = generated["package"].RpcClientV29(fake_transport({"getblockchaininfo": answer})).getblockchaininfo()
    assert info.chain == "regtest"
    assert info.blocks == 101
    assert info.softforks == {"taproot": {"active": True}}
    assert info.warnings == ""


def test_rpc_named_version_keeps_client_version(import_generated, fake_transport, table):
    doc = {"commands": {"version": [{"results": [{"type": "string", "key_name": ""}]}]}}
    methods = normalize_document(doc, table)
    package = import_generated(generate_all(methods, table=table))["package"]
    client = package.RpcClientV29(fake_transport({"version": "29.0"}))
    assert client.version == "v29"
    assert client.version_().value == "29.0"


def test_void_method_accepts_only_null(generated, fake_transport):
    package = generated["package"]
    assert package.RpcClientV29(fake_transport({"ping": None})).ping() is None
    with pytest.raises(package.ResponseMismatchError) as info:
        package.RpcClientV29(fake_transport({"ping": "pong"})).ping()
    assert info.value.method == "ping"
    assert info.value.value == "pong"


def test_positional_params_trim_unset_tail(generated, fake_transport):
    transport = fake_transport({"sendtoaddress": "ab" * 32})
    client = generated["package"].RpcClientV29(transport)
    response = client.sendtoaddress("bcrt1qaddr", 0.1, conf_target=6)
    assert response.value == "ab" * 32
    assert transport.calls == [
        ("sendtoaddress", ["bcrt1qaddr", 0.1, None, None, None, None, 6]),
    ]


def test_named_params_drop_unset_values(generated, fake_transport):
    transport = fake_transport({"sendtoaddress": "ff"})
    client = generated["package"].RpcClientV29(transport, named_params=True)
    client.sendtoaddress("bcrt1qaddr", 0.1, conf_target=6)
    assert transport.calls == [
        ("sendtoaddress", {"address": "bcrt1qaddr", "amount": 0.1, "conf_target": 6}),
    ]


def test_modern_helpers_are_emitted(generated, fake_transport):
    transport = fake_transport({"sendtoaddress": "ff"})
    client = generated["package"].RpcClientV29(transport)
    client.send_to_address_with_fee_rate("bcrt1qaddr", 0.1, fee_rate=25)
    client.send_to_address_with_conf_target("bcrt1qaddr", 0.2, conf_target=3)
    assert transport.calls == [
        ("sendtoaddress", ["bcrt1qaddr", 0.1, None, None, None, None, None, None, None, 25]),
        ("sendtoaddress", ["bcrt1qaddr", 0.2, None, None, None, None, 3]),
    ]


def test_legacy_version_has_no_fee_rate_helper(sample_methods, import_generated):
    modules = import_generated(generate_all(sample_methods, Version(20)), package="v20")
    client_class = modules["package"].RpcClientV20
    assert hasattr(client_class, "send_to_address_with_conf_target")
    assert not hasattr(client_class, "send_to_address_with_fee_rate")


def test_helpers_skipped_without_target_method(generated):
    client_class = generated["package"].RpcClientV29
    assert not hasattr(client_class, "mine_to_address")
    assert not hasattr(client_class, "create_descriptor_wallet")


def test_method_docstrings_carry_help_text(generated):
    doc = generated["client"].RpcClientV29.sendtoaddress.__doc__
    assert "Send an amount to a given address." in doc
    assert "conf_target (int, optional)" in doc


# ---- Generated batch builder --------------------------------------------------

def test_batch_fills_called_methods(generated, fake_transport):
    batch = generated["batch"]
    transport = fake_transport({"getblockcount": 7, "getblockhash": "00ff", "ping": None})
    results = (
        batch.BatchBuilder(transport)
        .getblockcount()
        .getblockhash(7)
        .ping()
        .execute()
    )
    assert results.getblockcount.value == 7
    assert results.getblockhash.value == "00ff"
    assert results.ping is None
    assert results.getmempoolsummary is batch.NOT_POPULATED
    assert not results.sendtoaddress
    assert [call[0] for call in transport.calls] == ["getblockcount", "getblockhash", "ping"]


def test_batch_records_calls(generated, fake_transport):
    builder = generated["batch"].BatchBuilder(fake_transport())
    builder.getblockhash(5).setmocktime(1700000000)
    assert builder.calls == [("getblockhash", [5]), ("setmocktime", [1700000000])]


def test_batch_rejects_unknown_methods_before_sending(generated, fake_transport):
    transport = fake_transport({"getblockcount": 1})
    builder = generated["batch"].BatchBuilder(transport).getblockcount().call("nosuchmethod")
    with pytest.raises(generated["package"].UnknownMethodError) as info:
        builder.execute()
    assert info.value.method == "nosuchmethod"
    assert transport.calls == []


def test_batch_void_method_rejects_values(generated, fake_transport):
    builder = generated["batch"].BatchBuilder(fake_transport({"ping": 1})).ping()
    with pytest.raises(generated["package"].ResponseMismatchError):
        builder.execute()
