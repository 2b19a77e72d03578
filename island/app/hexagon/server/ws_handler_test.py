"""Tests for the Hexagon Island WebSocket handler.

Each TestClient WebSocket only reads messages produced by its own handler.
Delivery to other seats is checked against fake sockets in
:class:`TestSubmitCommand`.
"""

from __future__ import annotations

import asyncio
import json
import unittest
import unittest.mock
from typing import Any

import fastapi.testclient

from island.app import main
from island.app.hexagon.engine import rules
from island.app.hexagon.errors import ErrorKind, TargetViolation
from island.app.hexagon.models.actions import ActionType, Target, TargetKind
from island.app.hexagon.models.game_state import Config
from island.app.hexagon.models.ws_messages import ServerMessageType, SubmitCommand
from island.app.hexagon.server import table as table_module
from island.app.hexagon.server import ws_handler
from island.app.hexagon.session import GameSession


def _receive(ws: Any) -> dict[str, Any]:
    return json.loads(ws.receive_text())


def _free_spot(tbl: table_module.Table) -> tuple[int, int]:
    """Return a (node, road) pair that is legal for a setup placement."""
    brd = tbl.session.state.board
    for node_index in range(len(brd.nodes)):
        try:
            rules.check_node(brd, node_index, 'nobody', setup=True)
        except TargetViolation:
            continue
        for road_index in rules.roads_at(brd, node_index):
            return node_index, road_index
    raise AssertionError('board has no free spot')


def _placement(node_index: int, road_index: int) -> dict[str, Any]:
    return {
        'message_type': 'submit_command',
        'action': 'place_village_and_road',
        'targets': [
            {'kind': 'node', 'index': node_index},
            {'kind': 'road', 'index': road_index},
        ],
    }


class TestIslandWebSocket(unittest.TestCase):
    """Integration tests for the /island/ws WebSocket endpoint."""

    def setUp(self) -> None:
        # Both routers look the table up as ``table.table`` at call time.
        self._saved = table_module.table
        self._install(num_players=2)
        self.client = fastapi.testclient.TestClient(main.app)

    def tearDown(self) -> None:
        table_module.table = self._saved

    def _install(self, num_players: int) -> None:
        self.tbl = table_module.Table(
            GameSession(Config(num_players=num_players), seed=0)
        )
        table_module.table = self.tbl

    # ------------------------------------------------------------------
    # Join lifecycle
    # ------------------------------------------------------------------

    def test_join_sends_seat_then_broadcasts(self) -> None:
        with self.client.websocket_connect('/island/ws/Alice') as ws:
            seated = _receive(ws)
            self.assertEqual(seated['message_type'], ServerMessageType.SEATED)
            self.assertEqual(seated['player_name'], 'Alice')
            self.assertEqual(seated['seat'], 0)
            self.assertEqual(len(seated['player_key']), table_module.KEY_LENGTH)
            self.assertTrue(seated['player_key'].isalnum())

            joined = _receive(ws)
            self.assertEqual(joined['message_type'], ServerMessageType.PLAYER_JOINED)
            self.assertEqual(joined['total_players'], 1)

            update = _receive(ws)
            self.assertEqual(update['message_type'], ServerMessageType.STATUS_UPDATE)
            self.assertEqual(update['status']['phase'], 'boot')

    def test_full_table_starts_setup(self) -> None:
        with self.client.websocket_connect('/island/ws/Alice') as ws1:
            for _ in range(3):
                _receive(ws1)
            with self.client.websocket_connect('/island/ws/Bob') as ws2:
                self.assertEqual(_receive(ws2)['seat'], 1)
                joined = _receive(ws2)
                self.assertEqual(joined['player_name'], 'Bob')
                self.assertEqual(joined['total_players'], 2)
                bob_update = _receive(ws2)
                self.assertEqual(bob_update['status']['phase'], 'setup')
                self.assertEqual(bob_update['status']['allowed_actions'], [])
                self.assertEqual(len(bob_update['status']['board']['hexagons']), 19)

    def test_full_table_refuses_newcomer(self) -> None:
        with self.client.websocket_connect('/island/ws/Alice') as ws1:
            for _ in range(3):
                _receive(ws1)
            with self.client.websocket_connect('/island/ws/Bob') as ws2:
                for _ in range(3):
                    _receive(ws2)
                with self.client.websocket_connect('/island/ws/Carol') as ws3:
                    msg = _receive(ws3)
                    self.assertEqual(msg['message_type'], ServerMessageType.ERROR_MESSAGE)
                    self.assertEqual(msg['error_kind'], ErrorKind.STRUCTURE)

    def test_same_name_twice_refused(self) -> None:
        with self.client.websocket_connect('/island/ws/Alice') as ws1:
            for _ in range(3):
                _receive(ws1)
            with self.client.websocket_connect('/island/ws/Alice') as ws2:
                msg = _receive(ws2)
                self.assertEqual(msg['message_type'], ServerMessageType.ERROR_MESSAGE)

    def test_reconnect_rebinds_seat(self) -> None:
        with self.client.websocket_connect('/island/ws/Alice') as ws:
            key = _receive(ws)['player_key']
        with self.client.websocket_connect('/island/ws/Alice') as ws:
            seated = _receive(ws)
            self.assertEqual(seated['player_key'], key)
            self.assertEqual(len(self.tbl.seats), 1)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def test_accepted_command_returns_status(self) -> None:
        self._install(num_players=1)
        with self.client.websocket_connect('/island/ws/Alice') as ws:
            for _ in range(3):
                _receive(ws)
            node_index, road_index = _free_spot(self.tbl)
            ws.send_text(json.dumps(_placement(node_index, road_index)))
            update = _receive(ws)
            self.assertEqual(update['message_type'], ServerMessageType.STATUS_UPDATE)
            self.assertEqual(update['status']['allowed_actions'], ['end_turn'])
            board = update['status']['board']
            self.assertIsNotNone(board['nodes'][node_index]['player_key'])

    def test_out_of_turn_command_rejected(self) -> None:
        with self.client.websocket_connect('/island/ws/Alice') as ws1:
            for _ in range(3):
                _receive(ws1)
            with self.client.websocket_connect('/island/ws/Bob') as ws2:
                for _ in range(3):
                    _receive(ws2)
                ws2.send_text(
                    json.dumps({'message_type': 'submit_command', 'action': 'end_turn'})
                )
                msg = _receive(ws2)
                self.assertEqual(msg['message_type'], ServerMessageType.ERROR_MESSAGE)
                self.assertEqual(msg['error_kind'], ErrorKind.TURN)

    def test_rejected_command_sends_no_status(self) -> None:
        self._install(num_players=1)
        with self.client.websocket_connect('/island/ws/Alice') as ws:
            for _ in range(3):
                _receive(ws)
            ws.send_text(
                json.dumps({'message_type': 'submit_command', 'action': 'roll_dice'})
            )
            msg = _receive(ws)
            self.assertEqual(msg['message_type'], ServerMessageType.ERROR_MESSAGE)
            self.assertEqual(msg['error_kind'], ErrorKind.PHASE)

            # The next message is the status asked for, not a broadcast.
            ws.send_text(json.dumps({'message_type': 'request_status'}))
            update = _receive(ws)
            self.assertEqual(update['message_type'], ServerMessageType.STATUS_UPDATE)
            self.assertEqual(
                update['status']['allowed_actions'], ['place_village_and_road']
            )

    def test_invalid_json(self) -> None:
        with self.client.websocket_connect('/island/ws/Alice') as ws:
            for _ in range(3):
                _receive(ws)
            ws.send_text('not json')
            msg = _receive(ws)
            self.assertEqual(msg['message_type'], ServerMessageType.ERROR_MESSAGE)

    def test_too_many_targets(self) -> None:
        with self.client.websocket_connect('/island/ws/Alice') as ws:
            for _ in range(3):
                _receive(ws)
            ws.send_text(
                json.dumps(
                    {
                        'message_type': 'submit_command',
                        'action': 'build_stuff',
                        'targets': [{'kind': 'road', 'index': i} for i in range(6)],
                    }
                )
            )
            msg = _receive(ws)
            self.assertEqual(msg['message_type'], ServerMessageType.ERROR_MESSAGE)
            self.assertIn('Invalid message', msg['error'])

    def test_request_status(self) -> None:
        with self.client.websocket_connect('/island/ws/Alice') as ws:
            for _ in range(3):
                _receive(ws)
            ws.send_text(json.dumps({'message_type': 'request_status'}))
            msg = _receive(ws)
            self.assertEqual(msg['message_type'], ServerMessageType.STATUS_UPDATE)
            self.assertEqual(msg['status']['resources']['block'], 0)

    def test_message_after_reset(self) -> None:
        with self.client.websocket_connect('/island/ws/Alice') as ws:
            for _ in range(3):
                _receive(ws)
            self.client.post('/island/reset')
            self.assertEqual(_receive(ws)['message_type'], ServerMessageType.TABLE_RESET)
            ws.send_text(json.dumps({'message_type': 'request_status'}))
            msg = _receive(ws)
            self.assertEqual(msg['message_type'], ServerMessageType.ERROR_MESSAGE)


class TestSubmitCommand(unittest.TestCase):
    """Who hears about a submitted command, using fake sockets."""

    def setUp(self) -> None:
        self.tbl = table_module.Table(GameSession(Config(num_players=2), seed=0))
        self.ws1 = unittest.mock.AsyncMock()
        self.ws2 = unittest.mock.AsyncMock()
        self.alice = self.tbl.join('Alice', self.ws1)
        self.bob = self.tbl.join('Bob', self.ws2)

    def _submit(self, seat: table_module.Seat, msg: SubmitCommand) -> None:
        asyncio.run(ws_handler._handle_submit_command(self.tbl, seat, msg))

    @staticmethod
    def _sent(ws: unittest.mock.AsyncMock) -> list[dict[str, Any]]:
        return [json.loads(call.args[0]) for call in ws.send_text.await_args_list]

    def test_accepted_command_updates_everyone(self) -> None:
        node_index, road_index = _free_spot(self.tbl)
        self._submit(
            self.alice,
            SubmitCommand(
                action=ActionType.PLACE_VILLAGE_AND_ROAD,
                targets=[
                    Target(kind=TargetKind.NODE, index=node_index),
                    Target(kind=TargetKind.ROAD, index=road_index),
                ],
            ),
        )
        (alice_update,) = self._sent(self.ws1)
        (bob_update,) = self._sent(self.ws2)
        self.assertEqual(alice_update['message_type'], ServerMessageType.STATUS_UPDATE)
        self.assertEqual(alice_update['status']['allowed_actions'], ['end_turn'])
        self.assertEqual(bob_update['status']['allowed_actions'], [])
        self.assertEqual(
            bob_update['status']['board']['nodes'][node_index]['player_key'],
            self.alice.key,
        )

    def test_rejected_command_goes_to_sender_only(self) -> None:
        self._submit(self.bob, SubmitCommand(action=ActionType.END_TURN))
        (msg,) = self._sent(self.ws2)
        self.assertEqual(msg['message_type'], ServerMessageType.ERROR_MESSAGE)
        self.assertEqual(msg['error_kind'], ErrorKind.TURN)
        self.ws1.send_text.assert_not_awaited()


if __name__ == '__main__':
    unittest.main()
