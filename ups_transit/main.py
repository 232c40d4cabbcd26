import argparse
import logging
import os
import sys

import requests
from dotenv import load_dotenv
from tabulate import tabulate

from .config import ClientConfig
from .errors import ConfigurationError, TransitError
from .time_in_transit import TimeInTransit

# --- Environment Variables ---
ENV_OPTIONS = {
    "url": "UPS_URL",
    "access_license_number": "UPS_ACCESS_LICENSE_NUMBER",
    "user_id": "UPS_USER_ID",
    "password": "UPS_PASSWORD",
    "sender_city": "UPS_SENDER_CITY",
    "sender_state": "UPS_SENDER_STATE",
    "sender_zip": "UPS_SENDER_ZIP",
    "sender_country_code": "UPS_SENDER_COUNTRY_CODE",
    "order_cutoff_time": "UPS_ORDER_CUTOFF_TIME",
    "timeout": "UPS_TIMEOUT",
    "retry_count": "UPS_RETRY_COUNT",
    "verify_ssl": "UPS_VERIFY_SSL",
}
INT_OPTIONS = ("order_cutoff_time", "retry_count")
FALSE_VALUES = ("0", "false", "no", "off")


def config_from_env(environ=None):
    """Reads the client config from UPS_* environment variables (and a .env file, if present)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    options = {}
    for option, variable in ENV_OPTIONS.items():
        value = environ.get(variable)
        if value is None or value == "":
            continue
        try:
            if option in INT_OPTIONS:
                value = int(value)
            elif option == "timeout":
                value = float(value)
        except ValueError as e:
            raise ConfigurationError(f"{variable} must be a number, got {value!r}") from e
        if option == "verify_ssl" and value.lower() in FALSE_VALUES:
            value = False
        elif option == "verify_ssl" and value.lower() in ("1", "true", "yes", "on"):
            value = True
        options[option] = value
    return ClientConfig.from_options(options)


def build_parser():
    parser = argparse.ArgumentParser(description="UPS Time in Transit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- Estimate Command ---
    parser_estimate = subparsers.add_parser("estimate", help="Estimate delivery dates for a shipment.")
    parser_estimate.add_argument("--weight", required=True, help="Weight of the shipment.")
    parser_estimate.add_argument("--city", help="Destination city.")
    parser_estimate.add_argument("--state", help="Destination state.")
    parser_estimate.add_argument("--zip", help="Destination zip code.")
    parser_estimate.add_argument("--country-code", help="Destination country (defaults to US).")
    parser_estimate.add_argument("--packages", type=int, help="Number of packages (defaults to 1).")
    parser_estimate.add_argument("--unit", choices=["LBS", "KGS"], help="Unit of measurement (defaults to LBS).")

    # --- Pickup Date Command ---
    subparsers.add_parser("pickup-date", help="Show the pickup date a request made now would use.")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        client = TimeInTransit(config_from_env())

        if args.command == "pickup-date":
            print(client.pickup_date().isoformat())
            return 0

        delivery_dates = client.request({
            "weight": args.weight,
            "city": args.city,
            "state": args.state,
            "zip": args.zip,
            "country_code": args.country_code,
            "total_packages": args.packages,
            "unit_of_measurement": args.unit,
        })
    except (TransitError, requests.RequestException) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if not delivery_dates:
        print("No services returned for this shipment.")
        return 0

    rows = sorted(delivery_dates.items(), key=lambda item: item[1])
    print(tabulate(
        [(code, arrival.strftime("%Y-%m-%d %H:%M")) for code, arrival in rows],
        headers=["Service", "Estimated Arrival"],
        tablefmt="psql",
    ))
    return 0


if __name__ == "__main__":
    sys.exit(main())
