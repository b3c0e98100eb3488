"""Gather address nonces using batched JSON RPC requests."""

import json
import logging
from typing import List, Any, Dict

from ethereumetl.providers.auto import get_provider_from_uri
from ethereumetl.thread_local_proxy import ThreadLocalProxy

from ethnonces import jsonrpc
from ethnonces.requests import nonces
from ethnonces.requests.nonces import Nonces

LOG = logging.getLogger()


class NonceGatherer:
    """Gather address nonces using batched JSON RPC requests."""

    def __init__(self, interface: str, batch_size: int = 100, timeout: int = 60) -> None:
        """
        Initialization.

        Batch size should generally be at a few hundred at most as it might give timeout otherwise.

        Args:
            interface: Ethereum blockchain interface address.
            batch_size: How many requests are sent in one batch.
            timeout: Request timeout in seconds.
        """
        if batch_size < 1:
            raise ValueError('Batch size must be positive, got {}'.format(batch_size))
        self.batch_size = batch_size
        if interface[-4:] == '.ipc' and not interface.startswith('file://'):
            self._interface = 'file://' + interface
        else:
            self._interface = interface
        self._batch_gatherer = ThreadLocalProxy(lambda: get_provider_from_uri(self._interface,
                                                                              timeout=timeout,
                                                                              batch=True))

    def _generate_web3_requests(self, id_to_params: Dict[Any, Dict]) -> List[Any]:
        """
        Prepare all eth_getTransactionCount calls.

        Args:
            id_to_params: Dictionary of 'id: params' entries.

        Returns:
            A list of JSON RPC requests.
        """
        return nonces.requests(id_to_params)

    def _gather_batch(self, id_to_params: Dict[Any, Dict]) -> Nonces:
        """
        Sends one batch and sorts its responses.

        Args:
            id_to_params: Dictionary of 'id: params' entries of this batch.

        Returns:
            Nonce params and errors of the batch.
        """
        requests = self._generate_web3_requests(id_to_params)
        response = self._batch_gatherer.make_batch_request(json.dumps(requests))

        if not isinstance(response, list):
            raise jsonrpc.BatchResponseError(response)

        return nonces.from_responses(response, id_to_params)

    def gather_nonces(self, params_list: List[Dict]) -> Nonces:
        """
        Gathers nonces of the specified address and block pairs.

        Args:
            params_list: List of dictionaries holding 'address' and 'block_quantity'.

        Returns:
            Nonce params and errors of all batches, in request order of the batches.
        """
        id_to_params = jsonrpc.id_to_params(params_list)
        result = Nonces()
        batches = (len(params_list) + self.batch_size - 1) // self.batch_size

        for i in range(batches):
            start = i * self.batch_size
            end = min(start + self.batch_size, len(params_list))
            LOG.info('Gathering nonces: batch {} of {}'.format(i + 1, batches))
            batch = {request_id: id_to_params[request_id] for request_id in range(start, end)}
            result = result.merge(self._gather_batch(batch))

        LOG.info('Gathered {} nonces, {} errors.'.format(len(result.params_list),
                                                         len(result.errors)))
        return result
