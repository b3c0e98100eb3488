"""Single eth_getTransactionCount request and response."""
from typing import Any, Dict, Mapping, Tuple
import logging

from ethnonces import jsonrpc

LOG = logging.getLogger()

METHOD = 'eth_getTransactionCount'

OK = 'ok'
ERROR = 'error'


def request(request_id: Any, block_quantity: str, address: str) -> Dict[str, Any]:
    """
    Prepare an eth_getTransactionCount call.

    Args:
        request_id: Identifier of the request within its batch.
        block_quantity: Block at which the nonce is read, quantity or tag.
        address: Address whose nonce is to be gathered.

    Returns:
        JSON RPC request.
    """
    return jsonrpc.request(request_id, METHOD, [address, block_quantity])


def from_response(response: Dict, id_to_params: Mapping) -> Tuple[str, Dict]:
    """
    Decodes a response into nonce params or an error.

    The response identifier must be one of the requested identifiers, which
    sanitized responses guarantee.

    Args:
        response: Single response from the batch.
        id_to_params: Parameters of the requests, keyed by their identifier.

    Returns:
        (OK, nonce params) if the node returned a nonce, (ERROR, error) otherwise.
    """
    request_id = response['id']
    params = id_to_params[request_id]

    error = response.get('error')
    if isinstance(error, dict):
        return ERROR, _annotate_error(request_id, params, error)
    if error is not None:
        return ERROR, _invalid_response(request_id, params, 'error is not an object')

    if 'result' in response:
        result = response['result']
        # Nonces arrive as hex strings only, never as JSON numbers.
        if not isinstance(result, str):
            return ERROR, _invalid_response(request_id, params,
                                            'result is not a quantity')
        try:
            nonce = jsonrpc.quantity_to_integer(result)
        except ValueError:
            return ERROR, _invalid_response(request_id, params,
                                            'result is not a quantity')
        return OK, {'id': request_id,
                    'address_hash': params['address'],
                    'block_quantity': params['block_quantity'],
                    'block_number': _block_number(params['block_quantity']),
                    'nonce': nonce}

    return ERROR, _invalid_response(request_id, params, 'neither result nor error')


def _block_number(block_quantity: Any) -> Any:
    if jsonrpc.is_block_tag(block_quantity):
        return None
    try:
        return jsonrpc.quantity_to_integer(block_quantity)
    except ValueError:
        return None


def _annotate_error(request_id: Any, params: Dict, error: Dict) -> Dict:
    """Attaches the request parameters to a node error."""
    data = {'block_quantity': params['block_quantity'],
            'address': params['address']}
    if 'data' in error:
        data['error_data'] = error['data']

    return {'id': request_id,
            'code': error.get('code'),
            'message': error.get('message', ''),
            'data': data}


def _invalid_response(request_id: Any, params: Dict, reason: str) -> Dict:
    LOG.debug('Invalid response for request {}: {}'.format(request_id, reason))
    return {'id': request_id,
            'code': None,
            'message': 'Invalid response: {}'.format(reason),
            'data': {'block_quantity': params['block_quantity'],
                     'address': params['address']}}
