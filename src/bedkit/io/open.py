from io import IOBase, RawIOBase, BufferedReader, FileIO
from typing import Union, BinaryIO, Optional
from pathlib import Path
from sys import stdin

from bedkit.utils.resources import RESOURCES


# Constants ------------------------------------------------------------------------------------------------------------
DEFAULT_BUFFER_SIZE = 65536


# Classes --------------------------------------------------------------------------------------------------------------
class PeekableHandle(RawIOBase):
    """
    A raw wrapper around a borrowed BinaryIO stream that allows peeking at the beginning of the
    content without consuming it. Used by Xopen to sniff compression on streams it cannot seek.

    Closing the handle never closes the wrapped stream; the stream belongs to the caller.
    """
    def __init__(self, stream: BinaryIO, max_peek: int = 4096):
        """
        Initializes the PeekableHandle.

        Args:
            stream: The underlying binary stream.
            max_peek: Maximum number of bytes to buffer for peeking.
        """
        super().__init__()
        self._stream = stream
        self._peek_buffer = stream.read(max_peek) or b''
        self._buffer_pos = 0

    def peek(self, size: int = -1) -> bytes:
        """
        Returns content from the buffer without advancing the stream position.

        Args:
            size: Number of bytes to peek. If -1, returns the entire buffer.

        Returns:
            The peeked bytes.
        """
        remaining = self._peek_buffer[self._buffer_pos:]
        if size == -1 or size > len(remaining): return remaining
        return remaining[:size]

    def readable(self) -> bool: return True

    def readinto(self, b) -> int:
        """Fills ``b``, consuming the peek buffer before touching the stream."""
        n = len(b)
        if self._buffer_pos < len(self._peek_buffer):
            chunk = self._peek_buffer[self._buffer_pos:self._buffer_pos + n]
            self._buffer_pos += len(chunk)
        else:
            chunk = self._stream.read(n) or b''
        b[:len(chunk)] = chunk
        return len(chunk)


class Xopen:
    """
    Handles the Physical Layer: Compression and File System.

    Opens a layered read stream: raw source, an optional decompressor chosen from the magic bytes at the start of
    the data (never from the file extension), and a buffered reader on top. The layers are closed exactly once,
    top-down, by ``close``. Sources passed in as file objects are read but left open.

    Examples:
        >>> with Xopen("features.bed.gz") as f:
        ...     first = f.readline()
    """
    _MAGIC = {
        b'\x1f\x8b': 'gzip',
        b'BZh': 'bz2',
        b'\xfd7zXZ\x00': 'lzma',
        b'\x28\xb5\x2f\xfd': 'zstandard'
    }
    _MIN_N_BYTES = max(len(i) for i in _MAGIC.keys())
    _OPEN_FUNCS = {}

    def __init__(self, file: Union[str, Path, BinaryIO], buffer_size: int = DEFAULT_BUFFER_SIZE):
        """
        Initializes the Xopen context manager.

        Args:
            file: File path (str or Path), ``'-'`` for stdin, or an existing binary file object.
            buffer_size: Size of the buffering layer.
        """
        self.file = file
        self.buffer_size = buffer_size
        self.compression: Optional[str] = None
        self._raw: Optional[BinaryIO] = None
        self._decompressor: Optional[BinaryIO] = None
        self._handle: Optional[BufferedReader] = None
        self._file: Optional[FileIO] = None
        self._closed = False

    def __enter__(self) -> BufferedReader: return self.open()
    def __exit__(self, exc_type, exc_val, exc_tb): self.close()
    def __repr__(self): return f"Xopen({self.name!r}, compression={self.compression!r})"

    @property
    def name(self) -> str:
        if isinstance(self.file, (str, Path)): return str(self.file)
        return str(getattr(self.file, 'name', '<stream>'))

    @property
    def closed(self) -> bool: return self._closed

    @property
    def handle(self) -> Optional[BufferedReader]:
        """The top (buffered) layer, or None if not open."""
        return self._handle

    def _get_opener(self, pkg_name: str):
        """
        Retrieves the open function for a compression package, importing it if necessary.

        Args:
            pkg_name: Name of the compression package (e.g., 'gzip').

        Returns:
            The open function from the package.

        Raises:
            ModuleNotFoundError: If the module is not installed.
        """
        if pkg_name not in self._OPEN_FUNCS:
            self._OPEN_FUNCS[pkg_name] = RESOURCES.require_module(pkg_name).open
        return self._OPEN_FUNCS[pkg_name]

    def _sniff(self, start: bytes) -> Optional[str]:
        for magic, pkg in self._MAGIC.items():
            if start.startswith(magic): return pkg
        return None

    def open(self) -> BufferedReader:
        """
        Opens the stream chain and returns its buffered top layer.

        Returns:
            A buffered binary reader over the (decompressed) content.

        Raises:
            OSError: If the file cannot be opened.
            ModuleNotFoundError: If the data needs a decompressor that is not installed.
            ValueError: If this Xopen has already been closed.
        """
        if self._closed: raise ValueError(f"{self!r} is closed")
        if self._handle is not None: return self._handle

        # 1. Resolve Raw Stream
        if isinstance(self.file, IOBase):
            self._raw = PeekableHandle(self.file, self._MIN_N_BYTES)
        elif str(self.file) in {'-', 'stdin'}:
            self._raw = PeekableHandle(stdin.buffer, self._MIN_N_BYTES)
        else:
            self._raw = self._file = FileIO(str(Path(self.file).expanduser()), mode='r')

        try:
            # Pipes cannot be rewound after sniffing
            if self._file is not None and not self._file.seekable():
                self._raw = PeekableHandle(self._file, self._MIN_N_BYTES)

            # 2. Sniff Compression
            if isinstance(self._raw, PeekableHandle):
                start = self._raw.peek(self._MIN_N_BYTES)
            else:
                start = self._raw.read(self._MIN_N_BYTES)
                self._raw.seek(0)
            self.compression = self._sniff(start)

            # 3. Decompression and Buffering
            source = self._raw
            if self.compression == 'zstandard':
                self._decompressor = source = self._get_opener(self.compression)(self._raw, mode='rb', closefd=False)
            elif self.compression is not None:
                self._decompressor = source = self._get_opener(self.compression)(self._raw, mode='rb')
            self._handle = BufferedReader(source, self.buffer_size)
        except BaseException:
            self.close()
            raise
        return self._handle

    def close(self):
        """
        Closes every layer the chain opened, top-down. Calling it again is a no-op.

        Raises:
            OSError: The first error raised while closing a layer, after all layers were attempted.
        """
        if self._closed: return
        self._closed = True
        layers = [self._handle, self._decompressor, self._file]
        self._handle = self._decompressor = self._file = None
        error = None
        for layer in layers:
            if layer is None: continue
            try: layer.close()
            except OSError as e:
                if error is None: error = e
        if error is not None: raise error
