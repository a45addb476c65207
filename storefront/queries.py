"""GraphQL documents for the Shopify Storefront API"""

# Shared by every cart operation. Operations declare $linesFirst.
CART_FRAGMENT = """
  fragment CartFields on Cart {
    id
    checkoutUrl
    totalQuantity
    cost {
      subtotalAmount {
        amount
        currencyCode
      }
      totalAmount {
        amount
        currencyCode
      }
    }
    lines(first: $linesFirst) {
      edges {
        node {
          id
          quantity
          merchandise {
            ... on ProductVariant {
              id
              title
              price {
                amount
                currencyCode
              }
              product {
                title
                handle
                images(first: 1) {
                  edges {
                    node {
                      url
                      altText
                    }
                  }
                }
              }
            }
          }
        }
      }
    }
  }
"""

USER_ERRORS = """
    userErrors {
      field
      message
      code
    }
"""

CART_CREATE = f"""
  mutation CartCreate($input: CartInput!, $linesFirst: Int = 100) {{
    cartCreate(input: $input) {{
      cart {{
        ...CartFields
      }}
      {USER_ERRORS}
    }}
  }}
  {CART_FRAGMENT}
"""

CART_LINES_ADD = f"""
  mutation CartLinesAdd($cartId: ID!, $lines: [CartLineInput!]!, $linesFirst: Int = 100) {{
    cartLinesAdd(cartId: $cartId, lines: $lines) {{
      cart {{
        ...CartFields
      }}
      {USER_ERRORS}
    }}
  }}
  {CART_FRAGMENT}
"""

CART_LINES_UPDATE = f"""
  mutation CartLinesUpdate($cartId: ID!, $lines: [CartLineUpdateInput!]!, $linesFirst: Int = 100) {{
    cartLinesUpdate(cartId: $cartId, lines: $lines) {{
      cart {{
        ...CartFields
      }}
      {USER_ERRORS}
    }}
  }}
  {CART_FRAGMENT}
"""

CART_LINES_REMOVE = f"""
  mutation CartLinesRemove($cartId: ID!, $lineIds: [ID!]!, $linesFirst: Int = 100) {{
    cartLinesRemove(cartId: $cartId, lineIds: $lineIds) {{
      cart {{
        ...CartFields
      }}
      {USER_ERRORS}
    }}
  }}
  {CART_FRAGMENT}
"""

GET_CART = f"""
  query GetCart($cartId: ID!, $linesFirst: Int = 100) {{
    cart(id: $cartId) {{
      ...CartFields
    }}
  }}
  {CART_FRAGMENT}
"""

# ==================== Catalog ====================

GET_PRODUCTS = """
  query GetProducts($first: Int!) {
    products(first: $first) {
      edges {
        node {
          id
          title
          handle
          description
          priceRange {
            minVariantPrice {
              amount
              currencyCode
            }
          }
          images(first: 1) {
            edges {
              node {
                url
                altText
                width
                height
              }
            }
          }
          variants(first: 10) {
            edges {
              node {
                id
                title
                price {
                  amount
                  currencyCode
                }
                availableForSale
              }
            }
          }
        }
      }
    }
  }
"""

GET_PRODUCT_BY_HANDLE = """
  query GetProductByHandle($handle: String!) {
    product(handle: $handle) {
      id
      title
      handle
      description
      descriptionHtml
      priceRange {
        minVariantPrice {
          amount
          currencyCode
        }
        maxVariantPrice {
          amount
          currencyCode
        }
      }
      images(first: 10) {
        edges {
          node {
            url
            altText
            width
            height
          }
        }
      }
      variants(first: 25) {
        edges {
          node {
            id
            title
            price {
              amount
              currencyCode
            }
            availableForSale
            selectedOptions {
              name
              value
            }
          }
        }
      }
      options {
        id
        name
        values
      }
    }
  }
"""

GET_ALL_HANDLES = """
  query GetAllHandles($first: Int!) {
    products(first: $first) {
      edges {
        node {
          handle
        }
      }
    }
  }
"""
