SCHEME = 'http'
HOSTNAME = '169.254.169.254'
LATEST = 'latest'
METADATA = 'meta-data'

# http connections time out after 0.1 seconds
HTTP_TIMEOUT = 0.1

NOT_AVAILABLE = 'not available'

# lookup table of field name and meta-data destination
FIELDS = {
    'AmiId': 'ami-id',
    'AmiLaunchIndex': 'ami-launch-index',
    'AmiManifestPath': 'ami-manifest-path',
    'AncestorAmiIds': 'ancestor-ami-ids',
    'BlockDeviceMapping': 'block-device-mapping',
    'Hostname': 'hostname',
    'InstanceAction': 'instance-action',
    'InstanceId': 'instance-id',
    'InstanceType': 'instance-type',
    'KernelId': 'kernel-id',
    'LocalHostname': 'local-hostname',
    'LocalIpv4': 'local-ipv4',
    'Mac': 'mac',
    'Metrics': 'metrics/vhostmd',
    'Network': 'network/interfaces/macs',
    'Placement': 'placement/availability-zone',
    'ProductCodes': 'product-codes',
    'Profile': 'profile',
    'PublicHostname': 'public-hostname',
    'PublicIpv4': 'public-ipv4',
    'PublicKeys': 'public-keys',
    'RamdiskId': 'ramdisk-id',
    'ReservationId': 'reservation-id',
    'SecurityGroups': 'security-groups',
    'Services': 'services/domain',
    'UserData': 'user-data',
}

# user-data lives beside meta-data, not under it
TOP_LEVEL_FIELDS = ('UserData',)


def snake_case(field: str) -> str:
    """InstanceId -> instance_id, LocalIpv4 -> local_ipv4"""
    out = ''
    for i, char in enumerate(field):
        if char.isupper() and i > 0:
            out += '_'
        out += char.lower()
    return out


SNAKE_FIELDS = {snake_case(field): field for field in FIELDS}
