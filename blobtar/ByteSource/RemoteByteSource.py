import time
import requests
from .ByteSource import ByteSource


default_chunk_size = 128 * 1024
default_max_cache_size = 64 * 1024 * 1024
default_num_request_retries = 8


class RemoteByteSource(ByteSource):
    def __init__(
        self,
        url: str,
        *,
        verbose: bool = False,
        chunk_size: int = default_chunk_size,
        max_cache_size: int = default_max_cache_size,
        num_request_retries: int = default_num_request_retries,
    ):
        """Create a byte source for a remote file, read with HTTP range requests.

        Bytes are loaded in chunks of chunk_size and kept in memory, so reading
        an archive block by block does not issue a request per block.

        Args:
            url (str): The url of the remote file.
            verbose (bool, optional): Whether to print info for debugging. Defaults to False.
            chunk_size (int, optional): The number of bytes loaded per request.
            max_cache_size (int, optional): The maximum number of bytes to keep in memory.
            num_request_retries (int, optional): How many times a failed request is retried.
        """
        if not isinstance(url, str):
            raise Exception('Only string urls are supported for RemoteByteSource')
        self.url = url
        self._verbose = verbose
        self._chunk_size = chunk_size
        self._max_chunks_in_cache = max(1, int(max_cache_size / chunk_size))
        self._num_request_retries = num_request_retries
        self._memory_chunks = {}
        # chunk indices in order of loading, for cleaning up the cache
        self._memory_chunk_indices: list[int] = []

        # use aborted GET request rather than HEAD request to get the length
        # this is needed for presigned AWS URLs because HEAD requests are not supported
        response = requests.get(self.url, stream=True)
        if response.status_code == 200:
            self.size = int(response.headers["Content-Length"])
        else:
            raise Exception(
                f"Error getting file length: {response.status_code} {response.reason}"
            )
        # Close the connection without reading the content to avoid downloading the whole file
        response.close()

        self.session = requests.Session()

    def _read(self, start: int, end: int) -> bytes:
        chunk_start_index = start // self._chunk_size
        chunk_end_index = (end - 1) // self._chunk_size
        pieces = []
        for chunk_index in range(chunk_start_index, chunk_end_index + 1):
            chunk = self._load_chunk(chunk_index)
            chunk_offset = chunk_index * self._chunk_size
            pieces.append(chunk[max(start - chunk_offset, 0): end - chunk_offset])
        ret = b"".join(pieces)

        # clean up the cache
        if len(self._memory_chunk_indices) > self._max_chunks_in_cache:
            if self._verbose:
                print("Cleaning up cache")
            num_to_drop = max(1, int(self._max_chunks_in_cache * 0.5))
            for chunk_index in self._memory_chunk_indices[:num_to_drop]:
                self._memory_chunks.pop(chunk_index, None)
            self._memory_chunk_indices = self._memory_chunk_indices[num_to_drop:]

        return ret

    def _load_chunk(self, chunk_index: int) -> bytes:
        if chunk_index in self._memory_chunks:
            return self._memory_chunks[chunk_index]
        data_start = chunk_index * self._chunk_size
        data_end = min(data_start + self._chunk_size, self.size) - 1
        if self._verbose:
            print(f"Loading chunk {chunk_index} ({data_end - data_start + 1} bytes) from {self.url}")
        x = _get_bytes(
            self.session,
            self.url,
            data_start,
            data_end,
            num_retries=self._num_request_retries,
            verbose=self._verbose,
        )
        if len(x) != data_end - data_start + 1:
            raise Exception(
                f'Error loading chunk {chunk_index} from {self.url}: expected {data_end - data_start + 1} bytes, got {len(x)}'
            )
        self._memory_chunks[chunk_index] = x
        self._memory_chunk_indices.append(chunk_index)
        return x

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def _get_bytes(
    session: requests.Session,
    url: str,
    start_byte: int,
    end_byte: int,
    *,
    num_retries: int,
    verbose: bool = False,
) -> bytes:
    """Fetch the inclusive byte range start_byte..end_byte using the range header."""
    for try_num in range(num_retries + 1):
        try:
            range_header = f"bytes={start_byte}-{end_byte}"
            # use session to avoid creating a new connection each time
            response = session.get(url, headers={"Range": range_header})
            response.raise_for_status()
            return response.content
        except requests.RequestException as e:
            if try_num == num_retries:
                raise e
            delay = 0.1 * 2**try_num
            if verbose:
                print(f"Retrying after exception: {e}")
                print(f"Waiting {delay} seconds")
            time.sleep(delay)
    raise Exception("Unexpected: no attempts were made")
