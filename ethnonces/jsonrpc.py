"""JSON-RPC envelope, quantity helpers and batch response sanitization."""
from typing import Any, Dict, List, Mapping, Sequence, Union
import logging
import re

LOG = logging.getLogger()

JSONRPC_VERSION = '2.0'
BLOCK_TAGS = ('latest', 'earliest', 'pending', 'safe', 'finalized')
QUANTITY_PATTERN = re.compile(r'0[xX][0-9a-fA-F]+')


class BatchResponseError(Exception):
    """Raised when a node answers a batch request with something other than a list."""

    def __init__(self, response: Any) -> None:
        """
        Initialization.

        Args:
            response: The decoded reply of the node.
        """
        super().__init__('Batch request rejected: {}'.format(response))
        self.response = response


def request(request_id: Any, method: str, params: List[Any]) -> Dict[str, Any]:
    """
    Creates a JSON RPC request.

    Args:
        request_id: Identifier used to match the response to this request.
        method: Name of the RPC method.
        params: Positional parameters of the method.

    Returns:
        JSON RPC request in dictionary form.
    """
    return {'jsonrpc': JSONRPC_VERSION,
            'id': request_id,
            'method': method,
            'params': params}


def quantity_to_integer(quantity: Union[str, int]) -> int:
    """
    Converts a hex encoded quantity into an integer.

    Args:
        quantity: Quantity such as '0x1f'. Integers are returned unchanged.

    Returns:
        Integer value of the quantity.

    Raises:
        ValueError: If the quantity is not hex encoded.
    """
    if isinstance(quantity, bool) or (isinstance(quantity, int) and quantity < 0):
        raise ValueError('Not a quantity: {!r}'.format(quantity))
    if isinstance(quantity, int):
        return quantity
    if not isinstance(quantity, str) or not QUANTITY_PATTERN.fullmatch(quantity):
        raise ValueError('Not a quantity: {!r}'.format(quantity))
    return int(quantity, 16)


def integer_to_quantity(value: int) -> str:
    """
    Converts a non-negative integer into a hex encoded quantity.

    Args:
        value: Integer to be encoded.

    Returns:
        Hex encoded quantity.
    """
    if value < 0:
        raise ValueError('Quantities cannot be negative: {}'.format(value))
    return hex(value)


def is_block_tag(value: Any) -> bool:
    """Whether the value is a named block tag instead of a block quantity."""
    return value in BLOCK_TAGS


def id_to_params(params_list: Sequence[Dict]) -> Dict[int, Dict]:
    """
    Assigns request identifiers to parameters by their position.

    Args:
        params_list: Parameters of the individual requests.

    Returns:
        Dictionary containing 'id: params' entries.
    """
    return {request_id: params for request_id, params in enumerate(params_list)}


def sanitize_responses(responses: Sequence[Any], id_to_params: Mapping) -> List[Dict]:
    """
    Filters batch responses down to those answering the requested identifiers.

    Each requested identifier keeps at most one response, the first one received.
    Responses with a null identifier (nodes answer unparsable requests that way)
    are handed out to identifiers that got no response, in request order.

    Args:
        responses: Raw responses returned by the node.
        id_to_params: Parameters of the requests, keyed by their identifier.

    Returns:
        Responses whose identifiers are a subset of the requested ones.
    """
    sanitized = []
    answered = set()
    null_id_responses = []
    dropped = 0

    for response in responses:
        if not isinstance(response, dict) or 'id' not in response:
            dropped += 1
            continue
        response_id = response['id']
        if response_id is None:
            null_id_responses.append(response)
        elif _is_requested(response_id, id_to_params) and response_id not in answered:
            answered.add(response_id)
            sanitized.append(response)
        else:
            dropped += 1

    # Reassigned null id responses go after the directly matched ones.
    unanswered = [request_id for request_id in id_to_params if request_id not in answered]
    for request_id, response in zip(unanswered, null_id_responses):
        sanitized.append(dict(response, id=request_id))
    dropped += max(len(null_id_responses) - len(unanswered), 0)

    if dropped:
        LOG.warning('Dropped {} responses not matching any request.'.format(dropped))

    return sanitized


def _is_requested(response_id: Any, id_to_params: Mapping) -> bool:
    try:
        return response_id in id_to_params
    except TypeError:
        # Unhashable ids (lists, objects) can never match a request.
        return False
