from dogstatsd import __main__ as cli
from dogstatsd import ConfigurationError, MetricsClient, ServiceCheckStatus

import json
import logging
import pytest


def _run(args, udp_receiver, tmpdir, **config):
    config_path = str(tmpdir.join("dogstatsd.json"))
    with open(config_path, "w") as fp:
        fp.write(json.dumps(dict(config, port=udp_receiver.port)))
    return cli.main(["--config", config_path] + args)


def test_increment(udp_receiver, tmpdir):
    assert _run(["increment", "jobs", "--delta", "2", "--tag", "env:ci"], udp_receiver, tmpdir, namespace="ci") == 0
    assert udp_receiver.receive() == "ci.jobs:2|c|#env:ci"


@pytest.mark.parametrize(
    "args,expected",
    [
        (["decrement", "jobs"], "jobs:-1|c"),
        (["gauge", "queue", "12"], "queue:12|g"),
        (["timing", "latency", "1.5"], "latency:1.5|ms"),
        (["histogram", "size", "3"], "size:3|h"),
        (["set", "users", "alice"], "users:alice|s"),
        (["event", "deploy", "done", "--priority", "low", "--hostname", "h1"], "_e{6,4}:deploy|done|h:h1|p:low"),
        (["service-check", "db", "critical", "--message", "down"], "_sc|db|2|m:down"),
        (["service-check", "db", "1"], "_sc|db|1"),
    ],
)
def test_commands(udp_receiver, tmpdir, args, expected):
    assert _run(args, udp_receiver, tmpdir) == 0
    assert udp_receiver.receive() == expected


def test_invalid_status():
    with pytest.raises(SystemExit) as excinfo:
        cli.build_parser().parse_args(["service-check", "db", "broken"])
    assert excinfo.value.code == 2
    assert cli._status("warning") is ServiceCheckStatus.WARNING  # pylint: disable=protected-access


def test_load_config(tmpdir):
    client = MetricsClient("test")
    config_path = str(tmpdir.join("config.json"))
    with open(config_path, "w") as fp:
        fp.write(json.dumps({"host": "statsd.local", "port": 9125, "tags": ["env:prod"]}))
    assert cli.load_config(client, config_path) is client
    assert client.host == "statsd.local"
    assert client.config.default_tags == ("env:prod",)


@pytest.mark.parametrize("content", [None, "{not json", "[1, 2]", '{"port": 0}', "directory"])
def test_load_config_errors(tmpdir, content):
    client = MetricsClient("test")
    config_path = str(tmpdir.join("config.json"))
    if content == "directory":
        tmpdir.mkdir("config.json")
    elif content is not None:
        with open(config_path, "w") as fp:
            fp.write(content)
    with pytest.raises(ConfigurationError) as excinfo:
        cli.load_config(client, config_path)
    assert excinfo.value.instance is client


def test_main_reports_errors(tmpdir, caplog):
    config_path = str(tmpdir.join("config.json"))
    with open(config_path, "w") as fp:
        fp.write(json.dumps({"port": 70000}))
    with caplog.at_level(logging.ERROR):
        assert cli.main(["--config", config_path, "increment", "jobs"]) == 1
    assert "Port is out of range" in caplog.text


def test_config_directory_reports_error(tmpdir, caplog):
    with caplog.at_level(logging.ERROR):
        assert cli.main(["--config", str(tmpdir), "increment", "jobs"]) == 1
    assert "Cannot read config file" in caplog.text


def test_log_level(udp_receiver, tmpdir):
    assert cli.build_parser().parse_args(["--log-level", "debug", "increment", "a"]).log_level == "DEBUG"
    assert _run(["increment", "jobs"], udp_receiver, tmpdir) == 0

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--log-level", "bogus", "increment", "jobs"])
    assert excinfo.value.code == 2
