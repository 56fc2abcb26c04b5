"""
Tests for the nodeport command line interface
"""

import json

import yaml
from nodeport import main


def test_prints_port(capsys):
    """Test the default output is just the port"""
    assert main(["rpc-asset-hub-polkadot-01.yaml"]) == 0

    captured = capsys.readouterr()
    assert captured.out == "31131\n"
    assert captured.err == ""


def test_accepts_node_file_path(capsys):
    """Test a path to a node file is reduced to its name"""
    assert main(["nodes/rpc-kilt-polkadot-01.yaml"]) == 0
    assert capsys.readouterr().out == "35431\n"


def test_ip_output(capsys):
    """Test --ip prints ip:port"""
    assert main(["rpc-polkadot-01", "--ip"]) == 0
    assert capsys.readouterr().out == "192.168.211.10:31031\n"


def test_json_output(capsys):
    """Test --json prints the full node record"""
    assert main(["--json", "rpc-karura-kusama-01"]) == 0

    record = json.loads(capsys.readouterr().out)
    assert record['port'] == 36331
    assert record['chain'] == "karura"
    assert record['custom'] is True


def test_yaml_output(capsys):
    """Test --yaml prints the full node record"""
    assert main(["-y", "val-kusama-01"]) == 0

    record = yaml.safe_load(capsys.readouterr().out)
    assert record['port'] == 32021
    assert record['ip'] == "192.168.121.10"
    assert record['chain'] is None


def test_decode(capsys):
    """Test --decode prints the node name for a port"""
    assert main(["--decode", "31131"]) == 0
    assert capsys.readouterr().out == "rpc-asset-hub-polkadot-01\n"


def test_decode_with_ip(capsys):
    """Test --decode combines with --ip"""
    assert main(["--decode", "35431", "--ip"]) == 0
    assert capsys.readouterr().out == "192.168.211.24:35431\n"


def test_decode_not_a_number(capsys):
    """Test --decode rejects non-numeric input"""
    assert main(["--decode", "rpc-polkadot-01", "--no-color"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("InvalidFormat:")


def test_invalid_name_exits_with_error(capsys):
    """Test failures print to stderr and exit with 1"""
    assert main(["rpc-polkadot-00", "--no-color"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("OutOfRange: Instance 0 is out of range for role 'rpc'")
    assert "Fix:" in captured.err


def test_unknown_chain_on_network(capsys):
    """Test a custom chain under the wrong network is reported"""
    assert main(["rpc-kilt-kusama-01", "--no-color"]) == 1
    assert "UnknownIdentifier" in capsys.readouterr().err


def test_colored_errors_by_default(capsys):
    """Test errors are colored unless --no-color is given"""
    assert main(["rpc-polkadot"]) == 1
    assert "\033[91m" in capsys.readouterr().err


def test_decode_rejects_non_ascii_digits(capsys):
    """Test --decode only accepts ASCII digits"""
    assert main(["--decode", "²", "--no-color"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("InvalidFormat:")

    # Arabic-Indic digits for 31131
    assert main(["--decode", "٣١١٣١", "--no-color"]) == 1
    assert capsys.readouterr().err.startswith("InvalidFormat:")


def test_verbose_logs_resolution(capsys, caplog):
    """Test -v logs each resolution step while stdout stays the port"""
    assert main(["-v", "rpc-kilt-polkadot-01"]) == 0

    assert capsys.readouterr().out == "35431\n"
    messages = [r.getMessage() for r in caplog.records if r.levelname == "DEBUG"]
    assert any(m.startswith("Classified 'rpc-kilt-polkadot-01'") for m in messages)
    assert any(m.startswith("Resolved 'rpc-kilt-polkadot-01'") for m in messages)
    assert any(m.startswith("Encoded ") for m in messages)


def test_quiet_without_verbose(capsys, caplog):
    """Test no debug trace is logged without -v"""
    assert main(["rpc-kilt-polkadot-01"]) == 0

    assert capsys.readouterr().out == "35431\n"
    assert not [r for r in caplog.records if r.levelname == "DEBUG"]
