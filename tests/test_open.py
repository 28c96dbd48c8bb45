import io
import os
import threading

import pytest

from bedkit.io.open import Xopen, PeekableHandle
from bedkit.utils.resources import RESOURCES

from conftest import _compress


CONTENT = b'chr1\t0\t10\nchr1\t20\t30\n'


class TestPeekableHandle:
    def test_peek_does_not_consume(self):
        handle = PeekableHandle(io.BytesIO(b'abcdef'), max_peek=3)
        assert handle.peek() == b'abc'
        assert handle.peek(2) == b'ab'
        assert handle.read() == b'abcdef'

    def test_partial_reads_cross_the_peek_buffer(self):
        handle = PeekableHandle(io.BytesIO(b'abcdef'), max_peek=4)
        assert handle.read(2) == b'ab'
        assert handle.peek() == b'cd'
        assert handle.read(3) == b'cd'
        assert handle.read(3) == b'ef'
        assert handle.read(3) == b''

    def test_close_leaves_stream_open(self):
        stream = io.BytesIO(b'abc')
        handle = PeekableHandle(stream)
        handle.close()
        assert handle.closed
        assert not stream.closed


class TestXopen:
    @pytest.mark.parametrize('compression', [None, 'gzip', 'bz2', 'lzma', 'zstandard'])
    def test_detects_compression_from_magic(self, tmp_path, compression):
        path = tmp_path / 'data.bed'  # Extension never hints at the compression
        path.write_bytes(_compress(CONTENT, compression))
        with Xopen(path) as handle:
            assert handle.read() == CONTENT
        opener = Xopen(path)
        opener.open()
        assert opener.compression == compression
        opener.close()

    def test_extension_is_ignored(self, tmp_path):
        path = tmp_path / 'plain.bed.gz'
        path.write_bytes(CONTENT)
        opener = Xopen(path)
        assert opener.open().readline() == b'chr1\t0\t10\n'
        assert opener.compression is None
        opener.close()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Xopen(tmp_path / 'missing.bed').open()

    def test_close_is_idempotent(self, tmp_path):
        path = tmp_path / 'data.bed'
        path.write_bytes(_compress(CONTENT, 'gzip'))
        opener = Xopen(path)
        handle = opener.open()
        opener.close()
        opener.close()
        assert opener.closed
        assert handle.closed
        with pytest.raises(ValueError, match="closed"):
            opener.open()

    @pytest.mark.parametrize('compression', [None, 'gzip'])
    def test_borrowed_stream_is_not_closed(self, compression):
        stream = io.BytesIO(_compress(CONTENT, compression))
        opener = Xopen(stream)
        assert opener.open().read() == CONTENT
        opener.close()
        assert not stream.closed

    def test_small_buffer(self, tmp_path):
        path = tmp_path / 'data.bed'
        data = CONTENT * 500
        path.write_bytes(_compress(data, 'gzip'))
        with Xopen(path, buffer_size=16) as handle:
            assert b''.join(iter(handle.readline, b'')) == data

    def test_missing_decompressor(self, tmp_path, monkeypatch):
        path = tmp_path / 'data.bed'
        path.write_bytes(b'\x28\xb5\x2f\xfd' + b'\x00' * 16)

        def require_module(name):
            raise ModuleNotFoundError(f"Optional module '{name}' is not installed.")

        monkeypatch.setattr(Xopen, '_OPEN_FUNCS', {})
        monkeypatch.setattr(RESOURCES, 'require_module', require_module)
        opener = Xopen(path)
        with pytest.raises(ModuleNotFoundError, match="zstandard"):
            opener.open()
        assert opener.closed

    @pytest.mark.skipif(not hasattr(os, 'mkfifo'), reason="named pipes are not available")
    @pytest.mark.parametrize('compression', [None, 'gzip'])
    def test_named_pipe(self, tmp_path, compression):
        path = tmp_path / 'data.bed'
        os.mkfifo(path)
        data = _compress(CONTENT, compression)

        def write():
            with open(path, 'wb') as pipe: pipe.write(data)

        writer = threading.Thread(target=write)
        writer.start()
        opener = Xopen(path)
        try:
            assert opener.open().read() == CONTENT
            assert opener.compression == compression
            raw = opener._file
        finally:
            opener.close()
            writer.join()
        assert raw.closed

    def test_close_error_propagates_after_all_layers(self, tmp_path):
        path = tmp_path / 'data.bed'
        path.write_bytes(_compress(CONTENT, 'gzip'))
        opener = Xopen(path)
        handle = opener.open()
        raw = opener._file

        class FailingLayer:
            def close(self):
                handle.close()
                raise OSError("device went away")

        opener._handle = FailingLayer()
        with pytest.raises(OSError, match="device went away"):
            opener.close()
        assert opener.closed
        assert raw.closed
        opener.close()


class TestResources:
    def test_has_module(self):
        assert RESOURCES.has_module('numpy')
        assert not RESOURCES.has_module('bedkit_no_such_module')

    def test_require_module(self):
        assert RESOURCES.require_module('gzip').open
        with pytest.raises(ModuleNotFoundError, match="bedkit_no_such_module"):
            RESOURCES.require_module('bedkit_no_such_module')
