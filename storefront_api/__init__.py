# Storefront REST proxy
