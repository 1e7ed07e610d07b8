from chalicelib.constants.db_structure import INDEX_ATTRIBUTES

# db attribute -> ui field, None means the attribute is dropped from ui output
from_db = {
    **{attribute: None for attribute in INDEX_ATTRIBUTES},
    'record_type': None,
    'tenant_id': None,
    'id_': 'id',
    'name_': 'name',
    'name_en': 'nameEn',
    'order_': 'order',
    'status_': 'status',
    'image_url': 'imageUrl',
    'is_active': 'isActive',
    'is_remarks_required': 'isRemarksRequired',
    'available_blends': 'availableBlends',
    'category_id': 'categoryId',
    'patron_id': 'patronId',
    'patron_name': 'patronName',
    'menu_id': 'menuId',
    'blend_id': 'blendId',
    'blend_name': 'blendName',
    'date_created': 'createdAt',
    'date_updated': 'updatedAt'
}

# ui field -> db attribute
to_db = {ui_key: db_key for db_key, ui_key in from_db.items() if ui_key}
to_db['visible'] = 'is_active'
