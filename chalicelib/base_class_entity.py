from typing import Tuple, Dict, List, Any, Callable

from chalicelib.constants.db_structure import PARTITION_KEY, SORT_KEY
from chalicelib.constants.keys_structure import public_pk
from chalicelib.constants.substitute_keys import from_db, to_db
from chalicelib.utils import db as utils_db
from chalicelib.utils.data import substitute_keys, cleanup_dict, now_iso, to_ui_value, is_number
from chalicelib.utils.exceptions import NotFoundError, ValidationError
from chalicelib.utils.logger import logger


class EntityBase:
    sk = None
    record_type: str = ''

    required_immutable_fields_validation: Dict[str, Callable[[Any], bool]] = {}
    required_mutable_fields_validation: Dict[str, Callable[[Any], bool]] = {}
    optional_fields_validation: Dict[str, Callable[[Any], bool]] = {}

    def __init__(self, tenant_id, id_):
        self.tenant_id: str = tenant_id
        self.id_: str = id_
        self.db_record: Dict = {}

    @classmethod
    def from_db_record(cls, record: Dict):
        return cls(**{key: value for key, value in record.items() if key not in (PARTITION_KEY, SORT_KEY)})

    @classmethod
    def init_get_by_id(cls, tenant_id, id_):
        logger.info(f"init_get_by_id ::: {cls.record_type} {id_}")
        c = cls(tenant_id, id_)
        c.__init__(**c._get_db_item())
        return c

    def _get_pk_sk(self) -> Tuple[str, str]:
        """
        Should be re-implemented in each child class
        :return:
        partkey, sortkey of db item for child
        """
        return self.tenant_id, self.sk

    def _get_key(self) -> Dict:
        return utils_db.make_key(*self._get_pk_sk())

    def _get_db_item(self) -> Dict:
        item = utils_db.get_db_item(*self._get_pk_sk())
        if item is None:
            raise NotFoundError(f'{self.record_type.replace("_", " ").capitalize()} {self.id_} not found')
        return item

    def _to_dict(self) -> Dict:
        """
        Should be re-implemented in each child class
        :return:
        dict of item's attributes
        """
        return {
            'id_': self.id_,
            'tenant_id': self.tenant_id
        }

    def _index_attributes(self) -> Dict:
        """
        GSI key attributes of the record, empty when the entity is not indexed
        """
        return {}

    def _init_db_record(self) -> None:
        """
        New DB record initialization
        :return:
        None
        """
        pk, sk = self._get_pk_sk()
        self.db_record = {
            PARTITION_KEY: pk,
            SORT_KEY: sk,
            'record_type': self.record_type,
            **self._index_attributes(),
            **cleanup_dict(self._to_dict(), [None])
        }

    @staticmethod
    def raise_validation_error(key):
        message = f'Invalid or missing value for field {from_db.get(key) or key}'
        logger.warning(f"raise_validation_error ::: {message}")
        raise ValidationError(message)

    def _validate_mandatory_fields(self):
        """
        Validates mandatory fields if all fields have correct type to put to db
        Raise ValidationError in case if a field is not valid
        :return:
        None
        """
        for key, validator_func in {
            **self.required_immutable_fields_validation,
            **self.required_mutable_fields_validation
        }.items():
            if validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key)

    def _validate_optional_fields(self):
        for key, validator_func in self.optional_fields_validation.items():
            if self.db_record.get(key) is not None and validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key)

    def _update_fields_whitelist(self) -> List:
        return [*self.required_mutable_fields_validation.keys(), *self.optional_fields_validation.keys()]

    def _get_validated_fields(self, update_body: Dict) -> Dict:
        """
        Validates fields for create or update, update_body uses ui field names
        :return:
        Clean dict for update, unknown fields are dropped,
        a known field with a wrong value raises ValidationError
        """
        update_dict = dict(update_body)
        substitute_keys(dict_to_process=update_dict, base_keys=to_db)
        validation_dict = {**self.required_mutable_fields_validation, **self.optional_fields_validation}
        clean_dict = {}
        for key, value in update_dict.items():
            if key not in validation_dict:
                logger.warning(f'_get_validated_fields ::: {key=} is not allowed, removing from update dict..')
                continue
            if validation_dict[key](value) is not True:
                self.raise_validation_error(key)
            clean_dict[key] = value.strip() if isinstance(value, str) else value
        return clean_dict

    def _create_db_record(self) -> None:
        """
        Creates entity db record
        :return:
        None
        """
        self._init_db_record()
        self._validate_mandatory_fields()
        self._validate_optional_fields()
        utils_db.put_db_record(self.db_record)
        logger.info(f"_create_db_record ::: {self.record_type=} {self.id_=} {self.db_record.get(PARTITION_KEY)=} "
                    f"{self.db_record.get(SORT_KEY)=} successfully created")

    def _update_db_record(self, update_dict: Dict) -> None:
        """
        Updates entity db record with an already validated dict (db field names),
        date_updated is refreshed on every update.
        Entity attributes are reloaded from the updated record.
        :return:
        None
        """
        update_dict = {**update_dict, 'date_updated': now_iso()}
        self.db_record = utils_db.update_db_record(
            key=self._get_key(),
            update_body=update_dict,
            allowed_attrs_to_update=[*self._update_fields_whitelist(), *self._index_attributes().keys(),
                                     'date_updated']
        )
        self.__init__(**{key: value for key, value in self.db_record.items() if key not in (PARTITION_KEY, SORT_KEY)})
        logger.info(f"_update_db_record ::: {self.record_type=} {self.id_=} successfully updated")

    def _delete_db_record(self) -> None:
        utils_db.delete_db_record(self._get_key(), must_exist=True)
        logger.info(f"_delete_db_record ::: {self.record_type=} {self.id_=} successfully deleted")

    def _to_ui(self) -> Dict:
        item = cleanup_dict(self._to_dict(), [None])
        substitute_keys(dict_to_process=item, base_keys=from_db)
        return to_ui_value(item)

    def to_ui(self) -> Dict:
        return self._to_ui()


class PublicEntityBase(EntityBase):
    """
    Menu catalogue rows (categories, menu items, blends).
    They live in the public partition shared by every tenant.
    """
    sk_prefix = None

    @classmethod
    def get_by_id(cls, id_):
        return cls.init_get_by_id(public_pk, id_)

    @classmethod
    def list_all(cls) -> List:
        records = utils_db.query_items(public_pk, sort_key_prefix=cls.sk_prefix)
        return [cls.from_db_record(record) for record in records]

    @classmethod
    def next_display_order(cls) -> int:
        """
        New rows are appended after the current last one
        """
        orders = [getattr(entity, 'order_', None) for entity in cls.list_all()]
        return int(max([order for order in orders if is_number(order)], default=0)) + 1
