"""
Tests for the command-line interface
"""

import json

import pytest

from xorscope.cli import build_parser, main
from xorscope.core.codec import bytes_to_base64
from xorscope.core.presets import PresetLibrary, load_config
from xorscope.core.xor_ops import repeating_key_xor

from conftest import COOKING_HEX, ICE_CIPHERTEXT_HEX, ICE_PLAINTEXT


@pytest.fixture
def yellow_file(tmp_path, dickens):
    path = tmp_path / "6.txt"
    path.write_text(bytes_to_base64(repeating_key_xor(dickens, b"YELLOW")))
    return path


def test_break_prints_key(capsys, yellow_file):
    main(['break', str(yellow_file)])
    out = capsys.readouterr().out
    assert "[+] Key: 'YELLOW' (6 bytes)" in out
    assert "It was the best of times" in out


def test_break_json_only(capsys, yellow_file):
    main(['break', str(yellow_file), '--json-only'])
    data = json.loads(capsys.readouterr().out)
    assert data['recoveries'][0]['key'] == "YELLOW"


def test_break_writes_outputs(capsys, tmp_path, yellow_file):
    out_dir = tmp_path / "results"
    main(['break', str(yellow_file), '--out', str(out_dir), '--name', 'yellow'])
    assert (out_dir / "yellow.json").exists()
    assert (out_dir / "yellow.yml").exists()
    assert (out_dir / "yellow.txt").read_bytes().startswith(b"It was the best of times")
    assert "# Xorscope Report: yellow" in (out_dir / "yellow_report.md").read_text()
    assert load_config(out_dir / "yellow_config.yml") == PresetLibrary.balanced()


def test_break_hex_all_blocks(capsys, tmp_path):
    path = tmp_path / "ice.hex"
    path.write_text(ICE_CIPHERTEXT_HEX)
    main(['break', str(path), '--encoding', 'hex', '--all-blocks', '--top-n', '5', '--json-only'])
    data = json.loads(capsys.readouterr().out)
    assert any(r['key'] == "ICE" for r in data['recoveries'])
    assert ICE_PLAINTEXT.decode() in [r['plaintext'] for r in data['recoveries']]


def test_break_with_config_file(capsys, tmp_path, yellow_file):
    config = tmp_path / "breaker.yml"
    config.write_text("preset: quick\ntop_n: 2\n")
    main(['break', str(yellow_file), '--config', str(config), '--json-only'])
    data = json.loads(capsys.readouterr().out)
    assert data['metadata']['preset'] == "quick"
    assert len(data['keysizes']['tried']) == 2


def test_break_config_file_with_flag_overrides(capsys, tmp_path, yellow_file):
    config = tmp_path / "breaker.yml"
    config.write_text("preset: thorough\nname: mine\ntop_n: 2\n")
    main(['break', str(yellow_file), '--config', str(config), '--max-keysize', '20', '--json-only'])
    data = json.loads(capsys.readouterr().out)
    assert data['metadata']['preset'] == "mine"
    assert data['config']['max_keysize'] == 20
    assert data['config']['top_n'] == 2
    assert data['config']['sample_blocks'] is None


def test_single(capsys, tmp_path):
    path = tmp_path / "4.txt"
    path.write_text("a1b2c3d4e5f60718293a4b5c6d7e8f90\n" + COOKING_HEX + "\n")
    main(['single', str(path), '--json-only'])
    data = json.loads(capsys.readouterr().out)
    assert data['line_number'] == 2
    assert data['plaintext'] == "Cooking MC's like a pound of bacon"


def test_ecb(capsys, tmp_path):
    path = tmp_path / "8.txt"
    path.write_text(bytes(range(32)).hex() + "\n" + (b"Z" * 32).hex() + "\n")
    main(['ecb', str(path), '--json-only'])
    data = json.loads(capsys.readouterr().out)
    assert [d['line_number'] for d in data] == [2]


def test_ecb_writes_outputs(capsys, tmp_path):
    path = tmp_path / "8.txt"
    path.write_text(bytes(range(32)).hex() + "\n" + (b"Z" * 32).hex() + "\n")
    out_dir = tmp_path / "results"
    main(['ecb', str(path), '--out', str(out_dir), '--name', 'set1'])
    data = json.loads((out_dir / "set1.json").read_text())
    assert [d['line_number'] for d in data['detections']] == [2]
    report = (out_dir / "set1_report.md").read_text()
    assert "# Xorscope ECB Report: set1" in report
    assert "| 2 | 1 |" in report


def test_aes(capsys, tmp_path):
    from xorscope.core.ecb import aes_ecb_encrypt

    path = tmp_path / "7.txt"
    path.write_text(bytes_to_base64(aes_ecb_encrypt(b"YELLOW SUBMARINE", b"Vanilla Ice")))
    main(['aes', str(path), '--key', 'YELLOW SUBMARINE'])
    assert "Vanilla Ice" in capsys.readouterr().out


def test_encrypt(capsys, tmp_path):
    path = tmp_path / "poem.txt"
    path.write_bytes(ICE_PLAINTEXT)
    main(['encrypt', str(path), '--key', 'ICE'])
    assert capsys.readouterr().out.strip() == ICE_CIPHERTEXT_HEX


def test_missing_input_exits(capsys, tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        main(['break', str(tmp_path / "missing.txt")])
    assert exc_info.value.code == 1
    assert "Input file not found" in capsys.readouterr().err


def test_decode_error_exits(capsys, tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("abc")
    with pytest.raises(SystemExit) as exc_info:
        main(['break', str(path)])
    assert exc_info.value.code == 1
    assert "[!] Error:" in capsys.readouterr().err


def test_subcommand_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
