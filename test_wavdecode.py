"""
test_wavdecode.py — CLI smoke tests (decode / info).
"""
from __future__ import annotations

import json

import pytest

import wavdecode
from conftest import payload_for

MESSAGE = 'CQ CQ DE TEST'


@pytest.fixture
def wav_file(tmp_path, afsk_wav):
    path = tmp_path / 'file_1.wav'
    path.write_bytes(afsk_wav(payload_for(MESSAGE)))
    return path


def test_decode_prints_text(wav_file, capsys):
    wavdecode.main(['decode', str(wav_file)])
    out, err = capsys.readouterr()
    assert out.rstrip('\n') == MESSAGE.ljust(30)
    assert '✓ [OK] 30 chars' in err


def test_decode_json(wav_file, capsys):
    wavdecode.main(['decode', str(wav_file), '--json'])
    out, _ = capsys.readouterr()
    data = json.loads(out)
    assert data['success'] is True
    assert data['text'] == MESSAGE.ljust(30)
    assert data['payload_bytes'] == 31
    assert data['header']['sample_rate'] == 44_100


def test_decode_checksum_warning(tmp_path, afsk_wav, capsys):
    path = tmp_path / 'bad.wav'
    path.write_bytes(afsk_wav(payload_for(MESSAGE, checksum=0)))
    wavdecode.main(['decode', str(path)])
    _, err = capsys.readouterr()
    assert '⚠ 1 block(s) failed the checksum' in err


def test_decode_truncated_exits_1(tmp_path, capsys):
    path = tmp_path / 'short.wav'
    path.write_bytes(b'RIFF')
    with pytest.raises(SystemExit) as exc:
        wavdecode.main(['decode', str(path)])
    assert exc.value.code == 1
    out, err = capsys.readouterr()
    assert out == ''
    assert 'FAIL:truncated' in err


def test_decode_missing_file_exits_1(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        wavdecode.main(['decode', str(tmp_path / 'nope.wav')])
    assert exc.value.code == 1
    assert '✗ Error:' in capsys.readouterr().err


def test_info(wav_file, capsys):
    wavdecode.main(['info', str(wav_file)])
    info = json.loads(capsys.readouterr().out)
    assert info['chunk_id'] == 'RIFF'
    assert info['num_channels'] == 2
    assert info['pcm16_stereo'] is True
    assert info['min_one_run'] == 13
    assert info['min_zero_run'] == 27


def test_info_with_tolerance(wav_file, capsys):
    wavdecode.main(['info', str(wav_file), '--tolerance', '2'])
    info = json.loads(capsys.readouterr().out)
    assert (info['min_one_run'], info['min_zero_run']) == (12, 26)
