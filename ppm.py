# ppm.py

# Binary pixel-map ("P6") output. The format is an ASCII header
#   P6\n<width> <height>\n255\n
# followed by width * height * 3 raw bytes, R G B per pixel, top row first.

import os
import numpy as np
from image_buffer import ImageBuffer
from profiler import Profiler

PPM_MAGIC = b"P6"
MAX_CHANNEL_VALUE = 255

class PPMWriteError(OSError):
    """Creating, writing or flushing the output file failed."""
    def __init__(self, message: str, path):
        super().__init__(message)
        self.path = path

def ppm_header(width: int, height: int) -> bytes:
    return f"P6\n{width} {height}\n{MAX_CHANNEL_VALUE}\n".encode("ascii")

def encode_ppm(image: ImageBuffer) -> bytes:
    return ppm_header(image.width, image.height) + image.tobytes()

@Profiler.timed()
def write_ppm(image: ImageBuffer, path: str | os.PathLike) -> None:
    """
    Write `image` to `path`, replacing whatever is there.

    The file is always closed before returning. Any failure along the way
    raises PPMWriteError with the path and the underlying OSError chained.
    """
    try:
        stream = open(path, "wb")
    except OSError as why:
        raise PPMWriteError(f"Couldn't create {os.fspath(path)}: {why}", path) from why

    print(f"Writing image to file {os.fspath(path)}.")
    try:
        with stream:
            stream.write(ppm_header(image.width, image.height))
            stream.write(image.tobytes())
            stream.flush()
    except OSError as why:
        raise PPMWriteError(f"Couldn't write to {os.fspath(path)}: {why}", path) from why
    print(f"Successfully wrote to {os.fspath(path)}.")

def _read_header_tokens(data: bytes, count: int) -> tuple[list[bytes], int]:
    # Header tokens are whitespace separated, '#' starts a comment running to
    # the end of the line. Exactly one whitespace byte follows the last token.
    tokens = []
    index = 0
    while len(tokens) < count:
        if index >= len(data):
            raise ValueError("PPM header is truncated")
        byte = data[index:index + 1]
        if byte.isspace():
            index += 1
        elif byte == b"#":
            newline = data.find(b"\n", index)
            if newline == -1:
                raise ValueError("PPM header is truncated")
            index = newline + 1
        else:
            start = index
            while index < len(data) and not data[index:index + 1].isspace() and data[index:index + 1] != b"#":
                index += 1
            tokens.append(data[start:index])
    if index >= len(data) or not data[index:index + 1].isspace():
        raise ValueError("PPM header must end with a single whitespace byte")
    return tokens, index + 1

def read_ppm(path: str | os.PathLike) -> ImageBuffer:
    """Load a binary P6 file with a max value of 255 into a new ImageBuffer."""
    with open(path, "rb") as f:
        data = f.read()

    tokens, offset = _read_header_tokens(data, 4)
    magic, width_tok, height_tok, max_tok = tokens
    if magic != PPM_MAGIC:
        raise ValueError(f"Not a binary PPM file (magic {magic!r})")
    try:
        width, height, max_val = int(width_tok), int(height_tok), int(max_tok)
    except ValueError:
        raise ValueError(f"Bad PPM header values {tokens!r}") from None
    if max_val != MAX_CHANNEL_VALUE:
        raise ValueError(f"Only 8-bit PPM files are supported, max value is {max_val}")

    body = data[offset:]
    expected = width * height * 3
    if len(body) < expected:
        raise ValueError(f"PPM body has {len(body)} bytes, expected {expected}")

    image = ImageBuffer(width, height)
    image.pixels[:] = np.frombuffer(body, dtype=np.uint8, count=expected).reshape(height, width, 3)
    return image
