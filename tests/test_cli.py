"""Tests for the tgc command line."""

import pytest
from click.testing import CliRunner

from telegraf_client.cli import tgc


@pytest.fixture
def runner():
    return CliRunner()


class TestEncode:
    def test_point_with_tag_and_timestamp(self, runner):
        result = runner.invoke(
            tgc,
            [
                "encode", "cpu", "-t", "host=a b", "-f", "usage=20.5",
                "--timestamp", "100",
            ],
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == r"cpu,host=a\ b usage=20.5 100"

    def test_typed_fields(self, runner):
        result = runner.invoke(
            tgc,
            ["encode", "m", "-f", "count=3i", "-f", "ok=true", "-f", 'name="x y"'],
        )
        assert result.exit_code == 0, result.output
        assert result.output.strip() == 'm count=3i,ok=true,name="x y"'

    def test_field_is_required(self, runner):
        result = runner.invoke(tgc, ["encode", "cpu"])
        assert result.exit_code == 2

    def test_malformed_pair(self, runner):
        result = runner.invoke(tgc, ["encode", "cpu", "-f", "usage"])
        assert result.exit_code == 2
        assert "key=value" in result.output

    def test_unencodable_point(self, runner):
        result = runner.invoke(
            tgc, ["encode", "cpu", "-f", "usage=9223372036854775808i"]
        )
        assert result.exit_code == 1
        assert "64 bits" in result.output

    def test_non_finite_text_is_a_string(self, runner):
        result = runner.invoke(tgc, ["encode", "m", "-f", "name=inf", "-f", "n=nan"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == 'm name="inf",n="nan"'


class TestSend:
    def test_send_udp(self, runner, udp_server, udp_address):
        result = runner.invoke(
            tgc, ["send", "--address", udp_address, "mem", "-f", "used=10i"]
        )
        assert result.exit_code == 0, result.output
        data, _ = udp_server.recvfrom(4096)
        assert data == b"mem used=10i\n"

    def test_send_with_config(self, runner, tmp_path, udp_server, udp_address):
        config_file = tmp_path / "telegraf.ini"
        config_file.write_text(f"[telegraf]\naddress = {udp_address}\ntimeout = 1\n")
        result = runner.invoke(
            tgc, ["send", "--config", str(config_file), "mem", "-f", "used=1i"]
        )
        assert result.exit_code == 0, result.output
        data, _ = udp_server.recvfrom(4096)
        assert data == b"mem used=1i\n"

    def test_missing_section(self, runner, tmp_path):
        config_file = tmp_path / "telegraf.ini"
        config_file.write_text("[other]\n")
        result = runner.invoke(
            tgc, ["send", "--config", str(config_file), "mem", "-f", "used=1i"]
        )
        assert result.exit_code == 2

    def test_invalid_timeout_in_config(self, runner, tmp_path, udp_address):
        config_file = tmp_path / "telegraf.ini"
        config_file.write_text(f"[telegraf]\naddress = {udp_address}\ntimeout = x\n")
        result = runner.invoke(
            tgc, ["send", "--config", str(config_file), "mem", "-f", "used=1i"]
        )
        assert result.exit_code == 2

    def test_no_address(self, runner):
        result = runner.invoke(tgc, ["send", "mem", "-f", "used=1i"])
        assert result.exit_code == 2
        assert "No address" in result.output

    def test_invalid_address(self, runner):
        result = runner.invoke(tgc, ["send", "--address", "ftp://x", "m", "-f", "f=1"])
        assert result.exit_code == 1
        assert "ftp" in result.output

    def test_connection_refused(self, runner, refused_tcp_address):
        result = runner.invoke(
            tgc, ["send", "--address", refused_tcp_address, "m", "-f", "f=1"]
        )
        assert result.exit_code == 1
