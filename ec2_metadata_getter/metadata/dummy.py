from types import MappingProxyType
from ec2_metadata_getter.metadata.exceptions import UnsupportedFieldError
from ec2_metadata_getter.metadata.fields import FIELDS, NOT_AVAILABLE

'''
Canned instance metadata, keyed by meta-data path.
All values are made up and only used outside of EC2.
'''
DUMMY_METADATA = MappingProxyType({
    'ami-id': 'ami-12345678',
    'ami-launch-index': '0',
    'ami-manifest-path': '(unknown)',
    'block-device-mapping': {
        'ebs0': 'sda',
        'ephemeral0': 'sdb',
        'root': '/dev/sda1',
    },
    'hostname': 'ip-10-123-123-123.ap-northeast-1.compute.internal',
    'instance-action': 'none',
    'instance-id': 'i-87654321',
    'instance-type': 't1.micro',
    'local-hostname': 'ip-10-123-123-123.ap-northeast-1.compute.internal',
    'local-ipv4': '10.123.123.123',
    'kernel-id': 'aki-12345678',
    'mac': '11:22:33:44:55:66',
    'network/interfaces/macs': {
        '11:22:33:44:55:66': {
            'device-number': '0',
            'local-hostname': 'ip-10-123-123-123.ap-northeast-1.compute.internal',
            'local-ipv4s': '10.123.123.123',
            'mac': '11:22:33:44:55:66',
            'owner-id': '123456789012',
            'public-hostname': 'ec2-12-34-56-78.ap-northeast-1.compute.amazonaws.com',
            'public-ipv4s': '12.34.56.78',
        },
    },
    'placement/availability-zone': 'ap-northeast-1c',
    'product-codes': 'abcdefghijklmnopqrstuvwxy',
    'profile': 'default-paravirtual',
    'public-hostname': 'ec2-12-34-56-78.ap-northeast-1.compute.amazonaws.com',
    'public-ipv4': '12.34.56.78',
    'public-keys': [
        {
            'keyname': 'my-public-key',
            'index': '0',
            'format': 'openssh-key',
            'key': 'ssh-rsa hogefuga my-public-key',
        },
    ],
    'ramdisk-id': 'ari-abcdefgh',
    'reservation-id': 'r-1234abcd',
    'security-groups': 'securitygroups',
    'services/domain': 'amazonaws.com',
    'user-data': 'this is userdata',
})


def _flatten(path: str, value, tree: dict) -> None:
    # directories answer with a newline separated listing of their entries
    if isinstance(value, str):
        tree[path] = value
    elif isinstance(value, (list, tuple)):
        # public-keys: "0=my-public-key", 0 -> "openssh-key", 0/openssh-key -> key
        tree[path] = '\n'.join(f"{k['index']}={k['keyname']}" for k in value)
        for k in value:
            tree[f"{path}/{k['index']}"] = k['format']
            tree[f"{path}/{k['index']}/{k['format']}"] = k['key']
    else:
        tree[path] = '\n'.join(value.keys())
        for key, child in value.items():
            _flatten(f'{path}/{key}', child, tree)


class DummyProvider:
    """
    Stand-in for the metadata endpoint.

    Serves canned data as a virtual tree of paths so that the composite
    assemblers of MetadataGetter walk it exactly like the real service.

    :param Mapping data: canned data keyed by meta-data path, defaults to DUMMY_METADATA
    """

    def __init__(self, data=DUMMY_METADATA):
        tree = {}
        for path, value in data.items():
            _flatten(path, value, tree)
        self._tree = MappingProxyType(tree)

    def get(self, field: str, sub_path: str = '') -> str:
        if field not in FIELDS:
            raise UnsupportedFieldError(field)
        path = FIELDS[field]
        if sub_path:
            path = f'{path}/{sub_path}'
        return self._tree.get(path, NOT_AVAILABLE)
