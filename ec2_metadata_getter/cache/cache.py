import hashlib
import json
import logging
import os

from ec2_metadata_getter.metadata.exceptions import CacheDirectoryError

LOG = logging.getLogger(__name__)

CONST_CACHE_DIR = '/tmp'
CONST_CACHE_EXTENSION = '.json'


class ResponseCache:
    """
    File cache for combined metadata responses.

    One file per set of requested fields. Entries never expire, a readable
    file is returned as is no matter how old it is. Concurrent writers to
    the same entry are not coordinated, the last write wins. Failed fields
    are cached as None too, so a single timeout sticks until the file is
    removed.

    :param str cache_dir: directory holding the cache files, must be writable
    """

    def __init__(self, cache_dir=CONST_CACHE_DIR):
        if not os.path.isdir(cache_dir) or not os.access(cache_dir, os.W_OK):
            raise CacheDirectoryError(f"Cache directory {cache_dir} not writable")
        self.cache_dir = cache_dir

    @staticmethod
    def request_id(fields) -> str:
        """Order independent hash of a set of field names"""
        serialized = json.dumps(sorted(set(fields)))
        return hashlib.sha1(serialized.encode('utf-8')).hexdigest()

    def path(self, fields) -> str:
        return os.path.join(self.cache_dir, self.request_id(fields) + CONST_CACHE_EXTENSION)

    def read(self, fields):
        """Return the cached response for fields, or None on a miss"""
        filename = self.path(fields)
        if not os.access(filename, os.R_OK):
            LOG.debug("Cache miss for %s", filename)
            return None
        try:
            with open(filename, encoding='utf-8') as cache_file:
                data = json.load(cache_file)
        except (OSError, ValueError) as e:
            LOG.warning("Ignoring unreadable cache file %s: %s", filename, e)
            return None
        LOG.debug("Cache hit for %s", filename)
        return data

    def write(self, fields, response):
        """Write response for fields and return the cache file name, or None when it failed"""
        filename = self.path(fields)
        try:
            with open(filename, 'w', encoding='utf-8') as cache_file:
                json.dump(response, cache_file)
        except OSError as e:
            LOG.warning("Could not write cache file %s: %s", filename, e)
            return None
        LOG.debug("Cached %d fields to %s", len(response), filename)
        return filename
