# esasg

Helpers for running an Elasticsearch cluster on autoscaling groups.

The package has three parts:

- `esasg.retention` decides which snapshots to keep. Detail gets coarser as
  snapshots get older: hourly, then daily, weekly, monthly and yearly.
- `esasg.events` decodes CloudWatch Events into typed detail objects. It
  covers autoscaling terminate events and EC2 spot interruption and
  rebalance events.
- `esasg.es` adds cluster APIs that are not in most clients. These cover
  `_cat/shards`, cluster settings, shard allocation exclusions, voting
  configuration exclusions and index recovery.

## Installation

```
pip install .
```

Python 3.10 or later is needed. The only runtime dependency is `requests`.

## Snapshot retention

```python
from datetime import datetime, timezone

from esasg.retention.config import Config
from esasg.retention.policy import keep, delete

config = Config(hourly=24, daily=6, weekly=4, monthly=11, yearly=1)
snapshots = [datetime(2015, 2, 27, h, tzinfo=timezone.utc) for h in range(12)]

to_keep = keep(config, snapshots)      # sorted, oldest first
to_delete = delete(config, snapshots)  # every snapshot not in to_keep
```

- `Config` holds the number of buckets for each granularity. Negative counts
  raise `ValueError`.
- `Config.min_interval()` gives the smallest configured interval, which is
  how often snapshot jobs should run. It returns `None` if every count is zero.
- The policy depends on the newest snapshot, not on the current time.
- With no snapshots, `keep` returns an empty list. A config with no buckets
  raises `ValueError`.
- The durations are fixed: `HOUR`, `DAY`, `WEEK`, `MONTH` and `YEAR` in
  `esasg.retention.config`. A year is 365.2425 days and a month is a twelfth
  of a year.

The lower-level pieces are `esasg.retention.timeseries.Timeseries`, a sorted
set of times without duplicates, and `esasg.retention.bucket.Buckets` /
`Bucket`. `esasg.retention.policy.redistribute` is also available.

## CloudWatch events

```python
from esasg.events.cloudwatch import CloudWatchEvent
from esasg.events.details import EC2SpotInterruption

message_text = """{
    "version": "0",
    "id": "12345678-1234-1234-1234-123456789012",
    "detail-type": "EC2 Spot Instance Interruption Warning",
    "source": "aws.ec2",
    "account": "123456789012",
    "time": "2019-09-26T12:55:24Z",
    "region": "us-east-2",
    "resources": [],
    "detail": {"instance-id": "i-1234567890abcdef0", "instance-action": "terminate"}
}"""

event = CloudWatchEvent.from_json(message_text)
if isinstance(event.detail, EC2SpotInterruption):
    print(event.detail.instance_id)
```

These detail types are registered:

| source | detail-type | class |
| --- | --- | --- |
| `aws.autoscaling` | `EC2 Instance Terminate Successful` | `AutoScalingLifecycleTerminateSuccessful` |
| `aws.autoscaling` | `EC2 Instance Terminate Unsuccessful` | `AutoScalingLifecycleTerminateUnsuccessful` |
| `aws.ec2` | `EC2 Spot Instance Interruption Warning` | `EC2SpotInterruption` |
| `aws.ec2` | `EC2 Instance Rebalance Recommendation` | `EC2SpotNotification` |

The detail of an event type that is not registered stays as the plain decoded
JSON value. If an event has no `source` or no `detail-type`,
`InvalidCloudWatchEvent` is raised.

To add a type of your own, register a factory. The factory is called with the
decoded `detail` value:

```python
from esasg.events.registry import register_detail_type

register_detail_type("com.example.myapp", "myDetailType", dict)
```

If the same source and detail type are registered twice,
`DetailTypeAlreadyRegistered` is raised.

## Elasticsearch services

```python
from esasg.es.client import Client
from esasg.es.settings import ClusterGetSettingsService, ClusterPutSettingsService
from esasg.es.shard_allocation import ShardAllocationExcludeSettings

client = Client("http://localhost:9200")  # default: http://127.0.0.1:9200

settings = ClusterGetSettingsService(client, include_defaults=True).do()
excluded = ShardAllocationExcludeSettings.from_settings(settings.transient)
print(excluded.has_name("node-1"))

ClusterPutSettingsService(client).transient(
    "cluster.routing.allocation.exclude._name", "node-1"
).do()
```

| module | service |
| --- | --- |
| `esasg.es.cat_shards` | `CatShardsService`; rows come back as `CatShardsRow` and `columns=("*",)` returns every column |
| `esasg.es.settings` | `ClusterGetSettingsService` and `ClusterPutSettingsService`; settings come back as `Settings` values, which take dotted paths with `get` |
| `esasg.es.shard_allocation` | `ShardAllocationExcludeSettings`; `to_map()` gives the settings to send back, where `None` clears a setting |
| `esasg.es.voting` | `ClusterPostVotingConfigExclusion` and `ClusterDeleteVotingConfigExclusion` |
| `esasg.es.recovery` | `IndicesRecoveryService`; results are `RecoveryShard` lists keyed by index name |

Each service has `build_url()`, which returns the path and query parameters,
and `do()`, which performs the request.

- `esasg.es.client.ElasticsearchError` is raised for a failed connection, a
  status outside 2xx or a reply that is not JSON. It carries `status` and
  `body`.
- A reply with the wrong shape raises `ValueError`.
- `ClusterPostVotingConfigExclusion` without a node raises `ValueError`.

## What this package does not do

It is a library only. It has no command-line programs or daemons. It does not
take or delete snapshots itself: it only says which to keep. It does not
receive events from a queue and does not talk to the autoscaling service. It
does not decide when to drain or replace cluster nodes.

## Tests

```
pip install .[test]
pytest
```