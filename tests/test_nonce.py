"""Single nonce request and response tests."""

import unittest

from ethnonces.requests import nonce

ID_TO_PARAMS = {1: {'address': '0xaa', 'block_quantity': '0x10'},
                2: {'address': '0xbb', 'block_quantity': 'latest'}}


class NonceRequestTester(unittest.TestCase):
    """Test creation of a single eth_getTransactionCount request."""

    def test_request(self):
        """Test that address goes before the block."""
        self.assertEqual(nonce.request(5, 'latest', '0xaa'),
                         {'jsonrpc': '2.0', 'id': 5, 'method': 'eth_getTransactionCount',
                          'params': ['0xaa', 'latest']})


class NonceResponseTester(unittest.TestCase):
    """Test decoding of a single eth_getTransactionCount response."""

    def test_result(self):
        """Test decoding of a nonce at a numbered block."""
        status, params = nonce.from_response({'id': 1, 'result': '0x2a'}, ID_TO_PARAMS)
        self.assertEqual(status, nonce.OK)
        self.assertEqual(params, {'id': 1, 'address_hash': '0xaa', 'block_quantity': '0x10',
                                  'block_number': 16, 'nonce': 42})

    def test_result_at_tag(self):
        """Test that block tags have no block number."""
        status, params = nonce.from_response({'id': 2, 'result': '0x0'}, ID_TO_PARAMS)
        self.assertEqual(status, nonce.OK)
        self.assertIsNone(params['block_number'])
        self.assertEqual(params['block_quantity'], 'latest')
        self.assertEqual(params['nonce'], 0)

    def test_error(self):
        """Test that node errors carry the request parameters."""
        response = {'id': 2, 'error': {'code': -32000, 'message': 'header not found'}}
        status, error = nonce.from_response(response, ID_TO_PARAMS)
        self.assertEqual(status, nonce.ERROR)
        self.assertEqual(error, {'id': 2, 'code': -32000, 'message': 'header not found',
                                 'data': {'block_quantity': 'latest', 'address': '0xbb'}})

    def test_error_keeps_node_data(self):
        """Test that data sent by the node is kept next to the parameters."""
        response = {'id': 1, 'error': {'code': 3, 'message': 'x', 'data': '0xdead'}}
        _, error = nonce.from_response(response, ID_TO_PARAMS)
        self.assertEqual(error['data'], {'block_quantity': '0x10', 'address': '0xaa',
                                         'error_data': '0xdead'})

    def test_error_wins_over_null_result(self):
        """Test that an error object is used even if a null result is present."""
        response = {'id': 1, 'result': None, 'error': {'code': -1, 'message': 'x'}}
        status, error = nonce.from_response(response, ID_TO_PARAMS)
        self.assertEqual(status, nonce.ERROR)
        self.assertEqual(error['code'], -1)

    def test_null_error_ignored(self):
        """Test that a null error next to a result is not treated as a failure."""
        status, params = nonce.from_response({'id': 1, 'result': '0x3', 'error': None},
                                             ID_TO_PARAMS)
        self.assertEqual(status, nonce.OK)
        self.assertEqual(params['nonce'], 3)

    def test_invalid_responses(self):
        """Test that malformed responses turn into errors instead of exceptions."""
        responses = [{'id': 1},
                     {'id': 1, 'result': None},
                     {'id': 1, 'result': 'not hex'},
                     {'id': 1, 'result': -3},
                     {'id': 1, 'result': 7},
                     {'id': 1, 'result': '0x_5'},
                     {'id': 1, 'result': '0x5\n'},
                     {'id': 1, 'result': ' 0x5'},
                     {'id': 1, 'error': 'boom'},
                     {'id': 1, 'result': '0x5', 'error': 'boom'}]
        for response in responses:
            status, error = nonce.from_response(response, ID_TO_PARAMS)
            self.assertEqual(status, nonce.ERROR)
            self.assertIsNone(error['code'])
            self.assertTrue(error['message'].startswith('Invalid response'))
            self.assertEqual(error['id'], 1)
            self.assertEqual(error['data'], {'block_quantity': '0x10', 'address': '0xaa'})
