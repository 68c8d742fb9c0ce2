import io
from contextlib import redirect_stdout

import pytest
from pytest_mock import MockerFixture

from git_sweep import utils
from git_sweep.exceptions import TerminalException
from git_sweep.terminal import Terminal

from .base_test import BaseTest
from .mockers import (FAKE_STDIN_FD, FAKE_TERMINAL_SETTINGS,
                      mock_get_stdin_fd, mock_read_stdin_byte_returning,
                      mock_tcgetattr)

# Interactive mode is not supported on Windows
termios = pytest.importorskip("termios")


class TestTerminal(BaseTest):

    def test_raw_mode_restores_settings(self, mocker: MockerFixture) -> None:
        self.patch_symbol(mocker, 'git_sweep.terminal.Terminal._get_stdin_fd', mock_get_stdin_fd)
        self.patch_symbol(mocker, 'termios.tcgetattr', mock_tcgetattr)
        setraw = mocker.patch('tty.setraw')
        tcsetattr = mocker.patch('termios.tcsetattr')

        with Terminal().raw_mode():
            setraw.assert_called_once_with(FAKE_STDIN_FD)
            tcsetattr.assert_not_called()

        tcsetattr.assert_called_once_with(FAKE_STDIN_FD, termios.TCSADRAIN, FAKE_TERMINAL_SETTINGS)

    def test_raw_mode_restores_settings_when_block_fails(self, mocker: MockerFixture) -> None:
        self.patch_symbol(mocker, 'git_sweep.terminal.Terminal._get_stdin_fd', mock_get_stdin_fd)
        self.patch_symbol(mocker, 'termios.tcgetattr', mock_tcgetattr)
        mocker.patch('tty.setraw')
        tcsetattr = mocker.patch('termios.tcsetattr')

        with pytest.raises(ValueError, match="boom"):
            with Terminal().raw_mode():
                raise ValueError("boom")

        tcsetattr.assert_called_once_with(FAKE_STDIN_FD, termios.TCSADRAIN, FAKE_TERMINAL_SETTINGS)

    def test_raw_mode_when_stdin_is_not_a_terminal(self, mocker: MockerFixture) -> None:
        self.patch_symbol(mocker, 'git_sweep.terminal.Terminal._get_stdin_fd', mock_get_stdin_fd)
        mocker.patch('termios.tcgetattr', side_effect=termios.error(25, 'Inappropriate ioctl for device'))
        setraw = mocker.patch('tty.setraw')
        tcsetattr = mocker.patch('termios.tcsetattr')

        with pytest.raises(TerminalException) as e:
            with Terminal().raw_mode():
                pytest.fail("block should never be entered")

        assert "Standard input is not a terminal" in str(e.value)
        setraw.assert_not_called()
        tcsetattr.assert_not_called()

    def test_raw_mode_when_stdin_is_closed(self, mocker: MockerFixture) -> None:
        self.patch_symbol(mocker, 'sys.stdin', None)
        tcgetattr = mocker.patch('termios.tcgetattr')
        setraw = mocker.patch('tty.setraw')

        with pytest.raises(TerminalException) as e:
            with Terminal().raw_mode():
                pytest.fail("block should never be entered")

        assert str(e.value) == "Standard input is closed"
        tcgetattr.assert_not_called()
        setraw.assert_not_called()

    def test_raw_mode_is_reported_to_output_helpers(self, mocker: MockerFixture) -> None:
        self.patch_symbol(mocker, 'git_sweep.terminal.Terminal._get_stdin_fd', mock_get_stdin_fd)
        self.patch_symbol(mocker, 'termios.tcgetattr', mock_tcgetattr)
        mocker.patch('tty.setraw')
        mocker.patch('termios.tcsetattr')

        with pytest.raises(KeyError):
            with Terminal().raw_mode():
                assert utils.raw_terminal_mode is True
                raise KeyError("feature")
        assert utils.raw_terminal_mode is False

    def test_raw_mode_when_switching_fails(self, mocker: MockerFixture) -> None:
        self.patch_symbol(mocker, 'git_sweep.terminal.Terminal._get_stdin_fd', mock_get_stdin_fd)
        self.patch_symbol(mocker, 'termios.tcgetattr', mock_tcgetattr)
        mocker.patch('tty.setraw', side_effect=termios.error(5, 'Input/output error'))
        tcsetattr = mocker.patch('termios.tcsetattr')

        with pytest.raises(TerminalException) as e:
            with Terminal().raw_mode():
                pytest.fail("block should never be entered")

        assert "Could not switch the terminal to raw mode" in str(e.value)
        # Whatever part of raw mode got applied is rolled back
        tcsetattr.assert_called_once_with(FAKE_STDIN_FD, termios.TCSADRAIN, FAKE_TERMINAL_SETTINGS)

    def test_failure_to_restore_settings_is_ignored(self, mocker: MockerFixture) -> None:
        self.patch_symbol(mocker, 'git_sweep.terminal.Terminal._get_stdin_fd', mock_get_stdin_fd)
        self.patch_symbol(mocker, 'termios.tcgetattr', mock_tcgetattr)
        mocker.patch('tty.setraw')
        mocker.patch('termios.tcsetattr', side_effect=termios.error(5, 'Input/output error'))

        with Terminal().raw_mode():
            pass

        # ... and never replaces the error raised within the block
        with pytest.raises(KeyError):
            with Terminal().raw_mode():
                raise KeyError("feature")

    def test_read_char(self, mocker: MockerFixture) -> None:
        self.patch_symbol(mocker, 'git_sweep.terminal.Terminal._read_stdin_byte',
                          mock_read_stdin_byte_returning("k", "", "\xe9", "\x03"))
        terminal = Terminal()

        assert terminal.read_char() == "k"
        assert terminal.read_char() is None
        assert terminal.read_char() == "é"
        assert terminal.read_char() == "\x03"

    def test_write(self) -> None:
        terminal = Terminal()
        with io.StringIO() as out:
            with redirect_stdout(out):
                terminal.write("prompt > ")
                terminal.write_line("k")
                terminal.write_line()
                terminal.flush()
            assert out.getvalue() == "prompt > k\r\n\r\n"
