# rbacmodel

This package holds the core pieces of a policy-based access control engine:

- `rbacmodel.model` provides `Model`. A model keeps the request, policy, role,
  effect and matcher definitions together with their policy rules. Rules can be
  added, removed, updated, filtered and queried.
- `rbacmodel.assertion` provides `Assertion`, which represents one definition
  line such as `r = sub, obj, act`. It also provides `PolicyOp` (`ADD`,
  `REMOVE`) and `IllegalArgumentError`. From grouping rules, an assertion
  builds role links in a role manager that you supply.
- `rbacmodel.policies` provides `PoliciesValues`, a collection of rules in
  insertion order. It is backed by a list, which keeps duplicates, or by a hash
  set, which keeps each rule once.
- `rbacmodel.effect` provides the `Effect` enum (`ALLOW`, `INDETERMINATE`,
  `DENY`) and the abstract `Effector` interface. An `Effector` merges matcher
  results into one decision.
- `rbacmodel.ipparser` parses IPv4/IPv6 addresses and CIDR networks.
- `rbacmodel.log` provides a small `Logger` that can be switched on and off,
  plus a process-wide current logger.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Working with a model

```python
from rbacmodel.model import Model

model = Model()
model.add_def("r", "r", "sub, obj, act")
model.add_def("m", "m", "r.sub == p.sub && r.obj == p.obj && r.act == p.act")
model.add_def("p", "p", "sub, obj, act")
model.add_def("e", "e", "some(where (p.eft == allow))")

model.add_policy("p", "p", ["alice", "data1", "read"])
model.add_policy("p", "p", ["bob", "data2", "write"])

model.has_policy("p", "p", ["alice", "data1", "read"])              # True
list(model.get_filtered_policy("p", "p", 1, ["data2"]))            # [['bob', 'data2', 'write']]
model.get_values_for_field_in_policy_all_types("p", 0)             # ['alice', 'bob']
```

Define `r` and `m` before `p`. If they are missing, `add_def("p", ...)` returns
`False`.

In a field filter, an empty value (`""`) matches any value.
`remove_filtered_policy` returns a pair: whether any rule was removed, and the
rules that were removed.

To build a model from a configuration object, use `Model.from_config(cfg)` or
`load_model_from_config`. The object needs a `get_string(key)` method that
answers keys such as `"request_definition::r"` and `"policy_definition::p2"`.
If no value exists for a key, it should return `""`. If the `r`, `p`, `e` or
`m` section is missing, `MissingRequiredSectionsError` is raised.

`build_role_links(rm)` and `build_incremental_role_links(rm, op, sec, p_type, rules)`
call `rm.add_link(name1, name2, domain)` and `rm.delete_link(name1, name2, domain)`
on the role manager you pass in. If a role definition has fewer than two `_`,
or a rule is shorter than the definition, `IllegalArgumentError` is raised.

## IP matching

```python
from rbacmodel.ipparser import parse_cidr, parse_ip

net = parse_cidr("192.168.2.0/24").net
net.contains(parse_ip("192.168.2.123"))   # True
net.contains(parse_ip("192.168.3.1"))     # False
```

`parse_cidr` raises `ParserError` for an invalid CIDR string. `parse_ip`,
`parse_ipv4` and `parse_ipv6` return `None` for an invalid address.
`cidr_mask(ones, bits)` builds a mask of 32 or 128 bits and raises `ValueError`
for any other size.

## What this package does not do

This package covers the model and its rule storage only. It does not contain:

- an enforcer that evaluates matcher expressions against requests;
- a role manager;
- a reader for model configuration files;
- adapters that load or save policies;
- a concrete `Effector`.

You supply these yourself through the interfaces described above.