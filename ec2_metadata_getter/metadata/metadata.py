import functools
import logging
import requests

from ec2_metadata_getter.cache.cache import CONST_CACHE_DIR, ResponseCache
from ec2_metadata_getter.metadata.dummy import DUMMY_METADATA, DummyProvider
from ec2_metadata_getter.metadata.exceptions import NotOnEc2Error, UnsupportedFieldError
from ec2_metadata_getter.metadata.fields import (
    FIELDS,
    HOSTNAME,
    HTTP_TIMEOUT,
    LATEST,
    METADATA,
    SCHEME,
    SNAKE_FIELDS,
    TOP_LEVEL_FIELDS,
)

LOG = logging.getLogger(__name__)


class MetadataGetter:
    """
    Query EC2 instance metadata from within a running instance.

    Every field of FIELDS is reachable through get(), through its camel case
    accessor (getInstanceId) or its snake case one (get_instance_id).
    Combined responses of get_all() and get_multiple() are cached on disk.

    :param str cache_dir: writable directory for cached responses
    :param bool dummy: answer from canned data instead of the endpoint
    :param Mapping dummy_data: canned data used in dummy mode
    :param float timeout: seconds before a request to the endpoint gives up
    :param str scheme: scheme of the metadata endpoint
    :param str hostname: host of the metadata endpoint
    """

    def __init__(self, cache_dir=CONST_CACHE_DIR, dummy=False, dummy_data=DUMMY_METADATA,
                 timeout=HTTP_TIMEOUT, scheme=SCHEME, hostname=HOSTNAME):
        self.cache = ResponseCache(cache_dir)
        self.timeout = timeout
        self.scheme = scheme
        self.hostname = hostname
        self._dummy = dummy
        self._dummy_provider = DummyProvider(dummy_data)
        self._composites = {
            'BlockDeviceMapping': self.get_block_device_mapping,
            'PublicKeys': self.get_public_keys,
            'Network': self.get_network,
        }

    @property
    def dummy(self) -> bool:
        return self._dummy

    def allow_dummy(self) -> None:
        """Return dummy data instead of raising outside of EC2, for good"""
        self._dummy = True

    def latest_path(self) -> str:
        return f'{self.scheme}://{self.hostname}/{LATEST}'

    def full_path(self, field: str, sub_path: str = '') -> str:
        if field in TOP_LEVEL_FIELDS:
            return f'{self.latest_path()}/{FIELDS[field]}'
        url = f'{self.latest_path()}/{METADATA}/{FIELDS[field]}'
        if sub_path:
            url = f'{url}/{sub_path}'
        return url

    def is_running_on_ec2(self) -> bool:
        """
        Probe the metadata endpoint.

        :raises NotOnEc2Error: endpoint unreachable and dummy mode disabled
        """
        if self._dummy:
            return True
        try:
            # headers only, the body is never read
            with requests.get(self.latest_path(), timeout=self.timeout, stream=True) as r:
                r.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise NotOnEc2Error(
                "[ERROR] Command not valid outside EC2 instance. "
                "Please run this command within a running EC2 instance or call allow_dummy()"
            ) from e
        return True

    def get(self, field: str, sub_path: str = ''):
        """
        Read one metadata value.

        :param str field: name from FIELDS, e.g. InstanceId
        :param str sub_path: path below the field, e.g. a block device mapping name
        :return: response body, or None when the request failed
        :raises UnsupportedFieldError: field is not in FIELDS
        :raises NotOnEc2Error: not on EC2 and dummy mode disabled
        """
        if field not in FIELDS:
            raise UnsupportedFieldError(field)
        self.is_running_on_ec2()
        if self._dummy:
            return self._dummy_provider.get(field, sub_path)

        url = self.full_path(field, sub_path)
        LOG.debug("Reading %s", url)
        try:
            r = requests.get(url, timeout=self.timeout)
            r.raise_for_status()
            return r.text
        except requests.exceptions.RequestException as e:
            LOG.warning("Failed to read %s: %s", url, e)
            return None

    def get_block_device_mapping(self):
        """
        e.g. {'ebs0': 'sda', 'ephemeral0': 'sdb', 'root': '/dev/sda1'}
        """
        names = self.get('BlockDeviceMapping')
        if names is None:
            return None
        output = {}
        for name in names.splitlines():
            device = self.get('BlockDeviceMapping', name)
            if device is None:
                return None
            output[name] = device
        return output

    def get_public_keys(self):
        """
        e.g. [{'keyname': 'my-public-key', 'index': '0',
               'format': 'openssh-key', 'key': 'ssh-rsa hogefuga my-public-key'}]
        """
        listing = self.get('PublicKeys')
        if listing is None:
            return None
        keys = []
        for entry in listing.splitlines():
            index, _, keyname = entry.partition('=')
            key_format = self.get('PublicKeys', index)
            if key_format is None:
                return None
            key = self.get('PublicKeys', f'{index}/{key_format}')
            if key is None:
                return None
            keys.append({
                'keyname': keyname,
                'index': index,
                'format': key_format,
                'key': key,
            })
        return keys

    def get_network(self):
        """
        e.g. {'11:22:33:44:55:66': {'device-number': '0', 'local-ipv4s': '10.123.123.123', ...}}
        """
        macs = self.get('Network')
        if macs is None:
            return None
        network = {}
        for mac in macs.splitlines():
            keys = self.get('Network', mac)
            if keys is None:
                return None
            interface = {}
            for key in keys.splitlines():
                value = self.get('Network', f'{mac}/{key}')
                if value is None:
                    return None
                interface[key] = value
            network[mac] = interface
        return network

    def fetch(self, field: str):
        """Read a field through its composite assembler when it has one"""
        if field not in FIELDS:
            raise UnsupportedFieldError(field)
        if field in self._composites:
            return self._composites[field]()
        return self.get(field)

    def get_all(self) -> dict:
        """Read every field in FIELDS, from the cache when possible"""
        return self.get_multiple(list(FIELDS))

    def get_multiple(self, fields) -> dict:
        """
        Read several fields at once, from the cache when possible.
        The cache is neither read nor written in dummy mode.

        :param list fields: names from FIELDS, order does not matter
        """
        fields = list(fields)
        for field in fields:
            if field not in FIELDS:
                raise UnsupportedFieldError(field)

        # canned data never reaches the cache shared with real lookups
        if not self._dummy:
            cached = self.cache.read(fields)
            if cached is not None:
                return cached

        response = {}
        for field in fields:
            response[field] = self.fetch(field)
        if not self._dummy:
            self.cache.write(fields, response)
        return response

    def __getattr__(self, name):
        # getInstanceId / get_instance_id -> get('InstanceId')
        if name.startswith('get_') and name[4:] in SNAKE_FIELDS:
            field = SNAKE_FIELDS[name[4:]]
        elif name.startswith('get') and not name.startswith('get_'):
            field = name[3:]
            if field not in FIELDS:
                raise UnsupportedFieldError(field)
        elif name.startswith('get_'):
            raise UnsupportedFieldError(name[4:])
        else:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

        if field in self._composites:
            return self._composites[field]
        return functools.partial(self.get, field)

    # camel case spellings of the explicit operations
    getBlockDeviceMapping = get_block_device_mapping
    getPublicKeys = get_public_keys
    getNetwork = get_network
    getAll = get_all
    getMultiple = get_multiple
    isRunningOnEc2 = is_running_on_ec2
    allowDummy = allow_dummy
