"""Nonce params and errors from a batch of eth_getTransactionCount requests."""
from collections.abc import Mapping
from typing import Any, Dict, List, Sequence

from ethnonces import jsonrpc
from ethnonces.requests import nonce


class Nonces:
    """
    Outcome of a batch of nonce requests.

    Attributes:
        params_list: Nonce params of the requests that succeeded, in response order.
        errors: Errors of the requests that failed, in response order.
    """

    def __init__(self, params_list: List[Dict] = None, errors: List[Dict] = None) -> None:
        self.params_list = params_list if params_list is not None else []
        self.errors = errors if errors is not None else []

    def merge(self, other: 'Nonces') -> 'Nonces':
        """Returns a new result holding the records of both results, self first."""
        return Nonces(self.params_list + other.params_list, self.errors + other.errors)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Nonces):
            return NotImplemented
        return self.params_list == other.params_list and self.errors == other.errors

    def __repr__(self) -> str:
        return 'Nonces(params_list={!r}, errors={!r})'.format(self.params_list, self.errors)


def requests(id_to_params: Mapping) -> List[Dict[str, Any]]:
    """
    Prepare all eth_getTransactionCount calls.

    Args:
        id_to_params: Dictionary of 'id: params' entries, params holding
            'block_quantity' and 'address'.

    Returns:
        A list of JSON RPC requests, one per entry.
    """
    _check_mapping(id_to_params)

    nonce_requests = []
    for request_id, params in id_to_params.items():
        nonce_requests.append(nonce.request(request_id,
                                            params['block_quantity'],
                                            params['address']))

    return nonce_requests


def from_responses(responses: Sequence[Any], id_to_params: Mapping) -> Nonces:
    """
    Sorts batch responses into nonce params and errors.

    A failed or malformed response only ever produces an error record, it does
    not stop the rest of the batch from being decoded. Requests without a
    matching response are left out of both lists.

    Args:
        responses: Raw responses of the batch.
        id_to_params: Dictionary of 'id: params' entries the batch was built from.

    Returns:
        Nonce params and errors of the batch.
    """
    _check_mapping(id_to_params)

    result = Nonces()
    for response in jsonrpc.sanitize_responses(responses, id_to_params):
        status, record = nonce.from_response(response, id_to_params)
        if status == nonce.OK:
            result.params_list.append(record)
        else:
            result.errors.append(record)

    return result


def _check_mapping(id_to_params: Any) -> None:
    if not isinstance(id_to_params, Mapping):
        raise TypeError('id_to_params must be a mapping, got {}'.format(
            type(id_to_params).__name__))
