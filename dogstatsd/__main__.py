# Copyright 2019, Aiven, https://aiven.io/
#
# This file is under the Apache License, Version 2.0.
# See the file `LICENSE` for details.
"""
dogstatsd - send a single metric, event or service check from the command line

"""
from .client import MetricsClient
from .errors import ClientError, ConfigurationError
from .types import EventAlertType, EventPriority, ServiceCheckStatus

import argparse
import json
import logging
import sys

LOG_FORMAT = "%(asctime)s\t%(name)s\t%(levelname)s\t%(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _number(value):
    try:
        return int(value)
    except ValueError:
        return float(value)


def _status(value):
    try:
        return ServiceCheckStatus(int(value))
    except ValueError:
        pass
    try:
        return ServiceCheckStatus[value.upper()]
    except KeyError as ex:
        raise argparse.ArgumentTypeError("invalid service check status {!r}".format(value)) from ex


def load_config(client, config_path):
    """Configure client from a JSON file holding an object of client options"""
    try:
        with open(config_path) as fp:
            config = json.load(fp)
    except OSError as ex:
        raise ConfigurationError(client, "Cannot read config file {!r}: {}".format(config_path, ex)) from ex
    except ValueError as ex:
        raise ConfigurationError(client, "Invalid JSON in config file {!r}: {}".format(config_path, ex)) from ex

    if not isinstance(config, dict):
        raise ConfigurationError(client, "Config file {!r} must contain a JSON object".format(config_path))
    return client.configure(**config)


def build_parser():
    parser = argparse.ArgumentParser(prog="dogstatsd", description="Send a metric, event or service check to DogStatsD")
    parser.add_argument("--config", help="JSON file with client options")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="logging level (default: %(default)s)",
    )
    tag_args = argparse.ArgumentParser(add_help=False)
    tag_args.add_argument("--tag", dest="tags", action="append", default=[], help="tag, may be repeated")

    commands = parser.add_subparsers(dest="command", required=True)
    for name in ("increment", "decrement"):
        cmd = commands.add_parser(name, parents=[tag_args])
        cmd.add_argument("metric")
        cmd.add_argument("--delta", type=int, default=1)
        cmd.add_argument("--sample-rate", type=float, default=1.0)

    for name in ("gauge", "timing", "histogram"):
        cmd = commands.add_parser(name, parents=[tag_args])
        cmd.add_argument("metric")
        cmd.add_argument("value", type=_number)
        if name == "histogram":
            cmd.add_argument("--sample-rate", type=float, default=1.0)

    cmd = commands.add_parser("set", parents=[tag_args])
    cmd.add_argument("metric")
    cmd.add_argument("value")

    cmd = commands.add_parser("event", parents=[tag_args])
    cmd.add_argument("title")
    cmd.add_argument("text")
    cmd.add_argument("--hostname")
    cmd.add_argument("--aggregation-key")
    cmd.add_argument("--priority", choices=[p.value for p in EventPriority])
    cmd.add_argument("--source")
    cmd.add_argument("--alert", choices=[a.value for a in EventAlertType])

    cmd = commands.add_parser("service-check", parents=[tag_args])
    cmd.add_argument("name")
    cmd.add_argument("status", type=_status)
    cmd.add_argument("--hostname")
    cmd.add_argument("--message")
    return parser


def send(client, args):
    if args.command == "increment":
        client.increment(args.metric, args.delta, args.sample_rate, args.tags)
    elif args.command == "decrement":
        client.decrement(args.metric, args.delta, args.sample_rate, args.tags)
    elif args.command == "gauge":
        client.gauge(args.metric, args.value, args.tags)
    elif args.command == "timing":
        client.timing(args.metric, args.value, args.tags)
    elif args.command == "histogram":
        client.histogram(args.metric, args.value, args.sample_rate, args.tags)
    elif args.command == "set":
        client.set(args.metric, args.value, args.tags)
    elif args.command == "event":
        metadata = {
            "hostname": args.hostname,
            "key": args.aggregation_key,
            "priority": args.priority,
            "source": args.source,
            "alert": args.alert,
        }
        client.event(args.title, args.text, metadata, args.tags)
    elif args.command == "service-check":
        client.service_check(args.name, args.status, {"hostname": args.hostname, "message": args.message}, args.tags)
    else:
        raise ValueError("Unknown command {!r}".format(args.command))
    return client


def main(args=None):
    args = build_parser().parse_args(args)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    client = MetricsClient("dogstatsd")
    try:
        if args.config:
            load_config(client, args.config)
        send(client, args)
    except ClientError as ex:
        logging.error("%s failed: %s", client, ex)
        return 1

    logging.getLogger("dogstatsd").debug("Sent %r", client.last_message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
