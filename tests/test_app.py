# =============================================================================
# Command Line Tests
# =============================================================================

import keyring
import pytest

from mailhawk.app import EXIT_FAILURE, EXIT_OK, EXIT_PARTIAL, main
from mailhawk.config import Config
from mailhawk.core import Account


@pytest.fixture
def config_path(temp_dir, sample_account):
    path = temp_dir / "config.toml"
    Config(default_account="test", accounts={"test": sample_account}).save(path)
    return path


@pytest.fixture
def no_keyring(monkeypatch):
    monkeypatch.setattr(keyring, "get_password", lambda service, username: None)


def test_dump_writes_message(capsysbinary, temp_dir):
    attachment = temp_dir / "notes.txt"
    attachment.write_bytes(b"remember the milk")

    code = main([
        "--config", str(temp_dir / "none.toml"),
        "--from", "me@example.com",
        "--to", "you@example.com",
        "--subject", "Hi",
        "--text", "hello",
        "--attach", str(attachment),
        "--dump",
    ])

    out = capsysbinary.readouterr().out
    assert code == EXIT_OK
    assert out.startswith(b"From: me@example.com\r\nTo: you@example.com\r\n")
    assert b"Content-Type: text/plain; charset=utf-8\r\n\r\nhello\r\n" in out
    assert b"Content-Type: multipart/mixed; boundary=" in out


def test_dump_uses_account_as_sender(capsysbinary, config_path, temp_dir):
    html = temp_dir / "body.html"
    html.write_text("<p>hi</p>", encoding="utf-8")

    code = main(["--config", str(config_path), "--to", "you@example.com", "--html-file", str(html), "--dump"])

    out = capsysbinary.readouterr().out
    assert code == EXIT_OK
    assert out.startswith(b"From: Test User <test@example.com>\r\n")
    assert b"Content-Type: text/html; charset=utf-8\r\n\r\n<p>hi</p>\r\n" in out


def test_dump_quotes_account_display_name(capsysbinary, temp_dir):
    path = temp_dir / "config.toml"
    account = Account(name="work", email="me@example.com", display_name="Doe, Jane")
    Config(default_account="work", accounts={"work": account}).save(path)

    code = main(["--config", str(path), "--to", "you@example.com", "--text", "hi", "--dump"])

    out = capsysbinary.readouterr().out
    assert code == EXIT_OK
    assert out.startswith(b'From: "Doe, Jane" <me@example.com>\r\n')
    (message_id,) = [line for line in out.split(b"\r\n") if line.startswith(b"Message-ID: ")]
    assert message_id.endswith(b"@example.com>")


def test_missing_attachment(capsys, temp_dir):
    code = main([
        "--config", str(temp_dir / "none.toml"),
        "--from", "me@example.com",
        "--attach", str(temp_dir / "missing.bin"),
        "--dump",
    ])

    assert code == EXIT_FAILURE
    assert "missing.bin" in capsys.readouterr().err


def test_unknown_account(capsys, config_path):
    code = main(["--config", str(config_path), "--account", "nope", "--to", "x@example.com"])

    assert code == EXIT_FAILURE
    assert "nope" in capsys.readouterr().err


def test_send(smtp_server, no_keyring, config_path):
    code = main(["--config", str(config_path), "--to", "you@example.com", "--text", "hello"])

    assert code == EXIT_OK
    assert smtp_server.commands[-2:] == ["DATA", "QUIT"]
    # No password in the keyring: anonymous, so no AUTH
    assert not any(c.startswith("AUTH") for c in smtp_server.commands)


def test_send_with_rejected_recipient(capsys, smtp_server, no_keyring, config_path):
    smtp_server.rejected.add("bad@example.com")

    code = main([
        "--config", str(config_path),
        "--to", "you@example.com",
        "--cc", "bad@example.com",
        "--text", "hello",
    ])

    assert code == EXIT_PARTIAL
    assert "bad@example.com" in capsys.readouterr().err


def test_send_failure(capsys, smtp_server, no_keyring, config_path):
    smtp_server.failures.add("connect")

    code = main(["--config", str(config_path), "--to", "you@example.com", "--text", "hello"])

    assert code == EXIT_FAILURE
    assert "Send failed" in capsys.readouterr().err


def test_no_recipients(capsys, no_keyring, config_path):
    code = main(["--config", str(config_path), "--text", "hello"])

    assert code == EXIT_FAILURE
    assert "No recipients" in capsys.readouterr().err


def test_send_failure_lists_refused_recipients(capsys, smtp_server, no_keyring, config_path):
    smtp_server.rejected.add("you@example.com")
    smtp_server.failures.add("data")

    code = main(["--config", str(config_path), "--to", "you@example.com", "--text", "hello"])

    err = capsys.readouterr().err
    assert code == EXIT_FAILURE
    assert "Send failed" in err
    assert "Recipient you@example.com refused: 550" in err
