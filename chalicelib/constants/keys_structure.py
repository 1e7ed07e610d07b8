tenant_pk = 'tenant:{tenant_key}'
public_pk = tenant_pk.format(tenant_key='PUBLIC')

patrons_sk = 'PATRON:{patron_id}'
orders_sk = 'ORDER:{order_id}'

categories_sk = 'CATEGORY:{category_id}'
menu_items_sk = 'MENU:{menu_id}'
blends_sk = 'BLEND:{blend_id}'

# prefixes used with begins_with on the sort key
patrons_prefix = patrons_sk.format(patron_id='')
orders_prefix = orders_sk.format(order_id='')
categories_prefix = categories_sk.format(category_id='')
menu_items_prefix = menu_items_sk.format(menu_id='')
blends_prefix = blends_sk.format(blend_id='')

gsi_tenant_patrons_pk = '{tenant_id}#PATRON'
gsi_patron_orders_pk = '{tenant_id}#PATRON#{patron_id}'
