#!/usr/bin/env python3
"""Ethereum address nonce gatherer."""

from typing import Any, List
import argparse
import json
import logging
import sys

from ethnonces import jsonrpc
from ethnonces.blockchain_wrapper import BlockchainWrapper
from ethnonces.requests.gatherer import NonceGatherer

LOG = logging.getLogger()


def add_args(parser: Any) -> None:
    """
    Adds arguments to the parser.

    Args:
        parser: Argument parser.
    """
    parser.add_argument('addresses', nargs='*',
                        help='Addresses whose nonces should be gathered.')
    parser.add_argument('--interface', required=True,
                        help='Geth API interface address.')
    parser.add_argument('--addresses_file', type=str, default=None,
                        help='File containing one address per line.')
    parser.add_argument('--block', type=str, default=None,
                        help='Block at which nonces are read. Hex quantity, decimal number '
                             'or tag (latest, earliest, pending, safe, finalized).'
                             ' Defaults to latest.')
    parser.add_argument('--confirmations', type=int, default=None,
                        help='Read nonces at the newest block with this many confirmations.')
    parser.add_argument('--batch_size', type=int, default=100,
                        help='How many requests should be sent in one batch.')
    parser.add_argument('--timeout', type=int, default=60,
                        help='Request timeout in seconds.')
    parser.add_argument('--verbose', action='store_true',
                        help='Log debug messages.')


def read_addresses(addresses: List[str], addresses_file: str = None) -> List[str]:
    """
    Collects addresses from the command line and the address file.

    Args:
        addresses: Addresses given on the command line.
        addresses_file: Path to a file containing one address per line.

    Returns:
        List of addresses, command line ones first.
    """
    collected = list(addresses)
    if addresses_file is not None:
        with open(addresses_file) as f:
            for line in f:
                line = line.strip()
                if line != '':
                    collected.append(line)

    return collected


def parse_block(block: str) -> str:
    """
    Normalizes a block argument into a block quantity or tag.

    Args:
        block: Hex quantity, decimal number or block tag.

    Returns:
        Block quantity or tag usable in a JSON RPC request.
    """
    if jsonrpc.is_block_tag(block):
        return block
    if block.startswith(('0x', '0X')):
        return jsonrpc.integer_to_quantity(jsonrpc.quantity_to_integer(block))
    if block.isdigit():
        return jsonrpc.integer_to_quantity(int(block))
    raise ValueError('Invalid block: {}'.format(block))


def resolve_block(args: Any) -> str:
    """
    Decides at which block the nonces are read.

    Args:
        args: Parsed arguments.

    Returns:
        Block quantity or tag.
    """
    if args.block is not None:
        return parse_block(args.block)
    if args.confirmations is not None:
        blockchain = BlockchainWrapper(args.interface, args.confirmations)
        return jsonrpc.integer_to_quantity(blockchain.get_confirmed_height())
    return 'latest'


def main(argv: List[str] = None) -> int:
    """Main function."""
    parser = argparse.ArgumentParser()
    add_args(parser)
    args = parser.parse_args(argv)

    logging.basicConfig(stream=sys.stderr, format=('%(asctime)s - %(levelname)s - %(message)s'))
    LOG.setLevel(logging.DEBUG if args.verbose else logging.INFO)

    try:
        addresses = read_addresses(args.addresses, args.addresses_file)
    except OSError as e:
        parser.error('cannot read addresses file: {}'.format(e))
    if not addresses:
        parser.error('no addresses given')
    try:
        block_quantity = resolve_block(args)
    except ValueError as e:
        parser.error(str(e))

    LOG.info('Gathering nonces of {} addresses at block {}.'.format(len(addresses),
                                                                     block_quantity))
    gatherer = NonceGatherer(args.interface, args.batch_size, args.timeout)
    result = gatherer.gather_nonces([{'block_quantity': block_quantity, 'address': address}
                                     for address in addresses])

    print(json.dumps({'nonces': result.params_list, 'errors': result.errors}, indent=2))
    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(main())
