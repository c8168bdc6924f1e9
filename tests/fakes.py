"""
In-memory stand-ins for the boto3 DynamoDB Table and the Secrets Manager client.

They implement only the calls the data layer makes, with the behaviour that
matters to it: condition objects from boto3.dynamodb.conditions, Limit /
ExclusiveStartKey / LastEvaluatedKey paging, ReturnValues, rejection of Python
floats, and ClientError with the real error codes.
"""
from __future__ import annotations

import copy
import itertools
from typing import Any, Callable, Dict, List, Optional, Tuple

from botocore.exceptions import ClientError

from versa_data.db.table import table_definition


def client_error(code: str, operation: str, message: str = "") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message or code}}, operation)


def _reject_floats(value: Any) -> None:
    if isinstance(value, float):
        raise TypeError("Float types are not supported. Use Decimal types instead.")
    if isinstance(value, dict):
        for v in value.values():
            _reject_floats(v)
    elif isinstance(value, (list, tuple, set)):
        for v in value:
            _reject_floats(v)


def evaluate(condition: Any, item: Dict[str, Any]) -> bool:
    """Evaluate a boto3 condition object against an item."""
    expression = condition.get_expression()
    operator = expression["operator"]
    values = expression["values"]
    if operator == "AND":
        return all(evaluate(v, item) for v in values)
    if operator == "OR":
        return any(evaluate(v, item) for v in values)
    if operator == "=":
        return values[0].name in item and item[values[0].name] == values[1]
    if operator == "begins_with":
        current = item.get(values[0].name)
        return isinstance(current, str) and current.startswith(values[1])
    if operator == "attribute_exists":
        return values[0].name in item
    if operator == "attribute_not_exists":
        return values[0].name not in item
    raise NotImplementedError(f"FakeTable does not support {operator!r}")


def _parse_update(expression: str) -> Tuple[List[Tuple[str, str]], List[str]]:
    set_part, remove_part = "", ""
    if expression.startswith("REMOVE "):
        remove_part = expression[len("REMOVE "):]
    else:
        set_part, _, remove_part = expression.partition(" REMOVE ")
        set_part = set_part[len("SET "):]
    sets = []
    for clause in set_part.split(","):
        if clause.strip():
            name, value = (part.strip() for part in clause.split("="))
            sets.append((name, value))
    removes = [name.strip() for name in remove_part.split(",") if name.strip()]
    return sets, removes


class FakeTable:
    """Single DynamoDB table with the GSIs from table_definition()."""

    def __init__(self, table_name: str = "versa-table") -> None:
        definition = table_definition(table_name)
        self.name = table_name
        self.hash_key, self.range_key = (k["AttributeName"] for k in definition["KeySchema"])
        self.indexes = {
            gsi["IndexName"]: tuple(k["AttributeName"] for k in gsi["KeySchema"])
            for gsi in definition["GlobalSecondaryIndexes"]
        }
        self.items: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def _key(self, item: Dict[str, Any]) -> Tuple[str, str]:
        return item[self.hash_key], item[self.range_key]

    def get_item(self, Key: Dict[str, Any], ConsistentRead: bool = False) -> Dict[str, Any]:
        self.calls.append(("get_item", {"Key": Key}))
        item = self.items.get(self._key(Key))
        return {"Item": copy.deepcopy(item)} if item is not None else {}

    def put_item(self, Item: Dict[str, Any], ConditionExpression: Any = None) -> Dict[str, Any]:
        self.calls.append(("put_item", {"Item": Item}))
        _reject_floats(Item)
        existing = self.items.get(self._key(Item))
        if ConditionExpression is not None and not evaluate(ConditionExpression, existing or {}):
            raise client_error("ConditionalCheckFailedException", "PutItem", "The conditional request failed")
        self.items[self._key(Item)] = copy.deepcopy(Item)
        return {}

    def update_item(
        self,
        Key: Dict[str, Any],
        UpdateExpression: str,
        ExpressionAttributeNames: Dict[str, str],
        ExpressionAttributeValues: Optional[Dict[str, Any]] = None,
        ConditionExpression: Any = None,
        ReturnValues: str = "NONE",
    ) -> Dict[str, Any]:
        self.calls.append(("update_item", {"Key": Key, "UpdateExpression": UpdateExpression}))
        values = ExpressionAttributeValues or {}
        _reject_floats(values)
        existing = self.items.get(self._key(Key))
        if ConditionExpression is not None and not evaluate(ConditionExpression, existing or {}):
            raise client_error("ConditionalCheckFailedException", "UpdateItem", "The conditional request failed")
        item = copy.deepcopy(existing) if existing is not None else dict(Key)
        sets, removes = _parse_update(UpdateExpression)
        for name, placeholder in sets:
            item[ExpressionAttributeNames[name]] = copy.deepcopy(values[placeholder])
        for name in removes:
            item.pop(ExpressionAttributeNames[name], None)
        self.items[self._key(Key)] = item
        if ReturnValues == "ALL_NEW":
            return {"Attributes": copy.deepcopy(item)}
        return {}

    def delete_item(self, Key: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("delete_item", {"Key": Key}))
        self.items.pop(self._key(Key), None)
        return {}

    def query(
        self,
        KeyConditionExpression: Any,
        IndexName: Optional[str] = None,
        FilterExpression: Any = None,
        Limit: Optional[int] = None,
        ExclusiveStartKey: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        self.calls.append(("query", {"IndexName": IndexName, "Limit": Limit}))
        if IndexName is None:
            hash_key, range_key = self.hash_key, self.range_key
        else:
            hash_key, range_key = self.indexes[IndexName]
        key_fields = tuple(dict.fromkeys((hash_key, range_key, self.hash_key, self.range_key)))

        def order(item: Dict[str, Any]) -> Tuple[str, ...]:
            return tuple(item[f] for f in key_fields)

        candidates = [
            item
            for item in self.items.values()
            if hash_key in item and range_key in item and evaluate(KeyConditionExpression, item)
        ]
        candidates.sort(key=order)
        return self._page(candidates, order, key_fields, FilterExpression, Limit, ExclusiveStartKey)

    def scan(
        self,
        FilterExpression: Any = None,
        Limit: Optional[int] = None,
        ExclusiveStartKey: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        self.calls.append(("scan", {"Limit": Limit}))
        key_fields = (self.hash_key, self.range_key)

        def order(item: Dict[str, Any]) -> Tuple[str, ...]:
            return tuple(item[f] for f in key_fields)

        candidates = sorted(self.items.values(), key=order)
        return self._page(candidates, order, key_fields, FilterExpression, Limit, ExclusiveStartKey)

    def _page(self, candidates, order, key_fields, filter_expression, limit, start) -> Dict[str, Any]:
        if start is not None:
            position = order(start)
            candidates = [c for c in candidates if order(c) > position]
        evaluated = candidates[:limit] if limit else candidates
        items = [
            copy.deepcopy(c) for c in evaluated if filter_expression is None or evaluate(filter_expression, c)
        ]
        response: Dict[str, Any] = {"Items": items, "Count": len(items), "ScannedCount": len(evaluated)}
        if limit and evaluated and len(evaluated) == limit:
            last = evaluated[-1]
            response["LastEvaluatedKey"] = {f: last[f] for f in key_fields}
        return response

    def raw(self, pk: str, sk: str) -> Optional[Dict[str, Any]]:
        """Stored item including key fields, for assertions."""
        return self.items.get((pk, sk))

    def put_raw(self, item: Dict[str, Any]) -> None:
        """Store an item directly, bypassing the store client (e.g. legacy or corrupt data)."""
        self.items[self._key(item)] = copy.deepcopy(item)


class FakeSecretsManager:
    """
    Secrets Manager client keeping every version and its staging labels.

    before_promote, when set, runs just before update_secret_version_stage so a
    test can interleave a concurrent writer.
    """

    def __init__(self) -> None:
        self.secrets: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.before_promote: Optional[Callable[[], None]] = None
        self._ids = itertools.count(1)

    def _versions(self, name: str, operation: str) -> Dict[str, Dict[str, Any]]:
        if name not in self.secrets:
            raise client_error(
                "ResourceNotFoundException", operation, "Secrets Manager can't find the specified secret."
            )
        return self.secrets[name]

    def _move_label(self, versions: Dict[str, Dict[str, Any]], label: str, version_id: str) -> None:
        for version in versions.values():
            version["stages"].discard(label)
        versions[version_id]["stages"].add(label)

    def _promote(self, versions: Dict[str, Dict[str, Any]], version_id: str) -> None:
        previous = self.current_version_id(versions)
        self._move_label(versions, "AWSCURRENT", version_id)
        if previous is not None and previous != version_id:
            self._move_label(versions, "AWSPREVIOUS", previous)

    @staticmethod
    def current_version_id(versions: Dict[str, Dict[str, Any]]) -> Optional[str]:
        for version_id, version in versions.items():
            if "AWSCURRENT" in version["stages"]:
                return version_id
        return None

    def current(self, name: str) -> Optional[str]:
        """SecretString of the AWSCURRENT version, for assertions."""
        versions = self.secrets.get(name)
        if not versions:
            return None
        return versions[self.current_version_id(versions)]["string"]

    def get_secret_value(self, SecretId: str, VersionStage: str = "AWSCURRENT") -> Dict[str, Any]:
        self.calls.append(("get_secret_value", {"SecretId": SecretId}))
        versions = self._versions(SecretId, "GetSecretValue")
        for version_id, version in versions.items():
            if VersionStage in version["stages"]:
                return {"Name": SecretId, "VersionId": version_id, "SecretString": version["string"]}
        raise client_error("ResourceNotFoundException", "GetSecretValue")

    def create_secret(self, Name: str, SecretString: str) -> Dict[str, Any]:
        self.calls.append(("create_secret", {"Name": Name, "SecretString": SecretString}))
        if Name in self.secrets:
            raise client_error("ResourceExistsException", "CreateSecret", f"The secret {Name} already exists.")
        version_id = f"v{next(self._ids)}"
        self.secrets[Name] = {version_id: {"string": SecretString, "stages": {"AWSCURRENT"}}}
        return {"Name": Name, "VersionId": version_id}

    def put_secret_value(
        self, SecretId: str, SecretString: str, VersionStages: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        self.calls.append(("put_secret_value", {"SecretId": SecretId, "SecretString": SecretString}))
        versions = self._versions(SecretId, "PutSecretValue")
        version_id = f"v{next(self._ids)}"
        versions[version_id] = {"string": SecretString, "stages": set()}
        if VersionStages is None:
            self._promote(versions, version_id)
        else:
            for label in VersionStages:
                if label == "AWSCURRENT":
                    self._promote(versions, version_id)
                else:
                    self._move_label(versions, label, version_id)
        return {"Name": SecretId, "VersionId": version_id}

    def update_secret_version_stage(
        self,
        SecretId: str,
        VersionStage: str,
        MoveToVersionId: Optional[str] = None,
        RemoveFromVersionId: Optional[str] = None,
    ) -> Dict[str, Any]:
        if self.before_promote is not None:
            hook, self.before_promote = self.before_promote, None
            hook()
        self.calls.append(("update_secret_version_stage", {"SecretId": SecretId, "MoveToVersionId": MoveToVersionId}))
        versions = self._versions(SecretId, "UpdateSecretVersionStage")
        holder = next((vid for vid, v in versions.items() if VersionStage in v["stages"]), None)
        if holder is not None and holder != MoveToVersionId and holder != RemoveFromVersionId:
            raise client_error(
                "InvalidParameterException",
                "UpdateSecretVersionStage",
                f"The parameter RemoveFromVersionId can't be empty. Staging label {VersionStage} is "
                f"currently attached to version {holder}",
            )
        if VersionStage == "AWSCURRENT":
            self._promote(versions, MoveToVersionId)
        else:
            self._move_label(versions, VersionStage, MoveToVersionId)
        return {"Name": SecretId}

    def write_concurrently(self, name: str, bundle_json: str) -> None:
        """Simulate another process overwriting the secret (plain PutSecretValue)."""
        self.put_secret_value(SecretId=name, SecretString=bundle_json)


