# Web storefront
