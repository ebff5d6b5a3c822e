import argparse
import json
import logging
import os
import sys
from ec2_metadata_getter.cache.cache import CONST_CACHE_DIR
from ec2_metadata_getter.metadata.exceptions import MetadataError
from ec2_metadata_getter.metadata.fields import FIELDS, NOT_AVAILABLE
from ec2_metadata_getter.metadata.metadata import MetadataGetter


def get_parser():
    parser = argparse.ArgumentParser(
        prog='ec2metadata',
        description='Print EC2 instance metadata. Without FIELD arguments every field is printed.',
    )
    parser.add_argument('fields', nargs='*', metavar='FIELD', help=f"one of: {', '.join(FIELDS)}")
    parser.add_argument('--dummy', action='store_true', help='use canned data outside of EC2')
    parser.add_argument(
        '--cache-dir',
        default=os.environ.get('EC2_METADATA_CACHE_DIR', CONST_CACHE_DIR),
        help='writable directory for cached responses',
    )
    parser.add_argument('--timeout', type=float, default=None, help='per request timeout in seconds')
    parser.add_argument('--json', action='store_true', help='print a single JSON document')
    parser.add_argument('--debug', action='store_true', help='log requests and cache use to stderr')
    return parser


def format_value(value) -> str:
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def main(argv=None):
    args = get_parser().parse_args(argv)
    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(levelname)s - %(message)s")

    options = {'cache_dir': args.cache_dir, 'dummy': args.dummy}
    if args.timeout is not None:
        options['timeout'] = args.timeout
    try:
        meta = MetadataGetter(**options)
        if args.fields:
            response = meta.get_multiple(args.fields)
        else:
            response = meta.get_all()
    except MetadataError as e:
        print(e, file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(response, indent=2))
    else:
        for field, value in response.items():
            print(f"{field}: {format_value(value)}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
