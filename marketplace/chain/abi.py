"""
Marketplace contract ABI.

One consolidated interface for every read and write the storefront makes.
The contract itself is deployed separately; only these entries are used.
"""

_PRODUCT_COMPONENTS = [
    {"name": "id", "type": "uint256"},
    {"name": "seller", "type": "address"},
    {"name": "name", "type": "string"},
    {"name": "price", "type": "uint256"},
    {"name": "available", "type": "bool"},
    {"name": "stock", "type": "uint256"},
]


def _view(name, inputs, outputs):
    return {
        "type": "function",
        "name": name,
        "stateMutability": "view",
        "inputs": inputs,
        "outputs": outputs,
    }


def _write(name, inputs, payable=False):
    return {
        "type": "function",
        "name": name,
        "stateMutability": "payable" if payable else "nonpayable",
        "inputs": inputs,
        "outputs": [],
    }


MARKETPLACE_ABI = [
    # Reads
    _view(
        "getAllProducts",
        [],
        [{"name": "", "type": "tuple[]", "components": _PRODUCT_COMPONENTS}],
    ),
    _view("nextProductId", [], [{"name": "", "type": "uint256"}]),
    _view(
        "getProductDetails",
        [{"name": "productId", "type": "uint256"}],
        [dict(component) for component in _PRODUCT_COMPONENTS],
    ),
    _view(
        "getOrderDetails",
        [{"name": "orderId", "type": "uint256"}],
        [
            {"name": "id", "type": "uint256"},
            {"name": "buyer", "type": "address"},
            {"name": "seller", "type": "address"},
            {"name": "productIds", "type": "uint256[]"},
            {"name": "quantities", "type": "uint256[]"},
            {"name": "totalPrice", "type": "uint256"},
            {"name": "status", "type": "uint8"},
            {"name": "timestamp", "type": "uint256"},
        ],
    ),
    _view(
        "getBuyerOrders",
        [{"name": "buyer", "type": "address"}],
        [{"name": "", "type": "uint256[]"}],
    ),
    _view(
        "getSellerOrders",
        [{"name": "seller", "type": "address"}],
        [{"name": "", "type": "uint256[]"}],
    ),
    _view(
        "getShippingInfo",
        [{"name": "orderId", "type": "uint256"}],
        [
            {"name": "street", "type": "string"},
            {"name": "city", "type": "string"},
            {"name": "state", "type": "string"},
            {"name": "zipCode", "type": "string"},
            {"name": "country", "type": "string"},
        ],
    ),
    _view(
        "registeredSellers",
        [{"name": "", "type": "address"}],
        [{"name": "", "type": "bool"}],
    ),
    # Writes
    _write(
        "placeOrder",
        [
            {"name": "productIds", "type": "uint256[]"},
            {"name": "quantities", "type": "uint256[]"},
        ],
        payable=True,
    ),
    _write(
        "addProduct",
        [
            {"name": "name", "type": "string"},
            {"name": "price", "type": "uint256"},
            {"name": "stock", "type": "uint256"},
        ],
    ),
    _write(
        "updateProduct",
        [
            {"name": "productId", "type": "uint256"},
            {"name": "name", "type": "string"},
            {"name": "price", "type": "uint256"},
            {"name": "stock", "type": "uint256"},
            {"name": "available", "type": "bool"},
        ],
    ),
    _write("registerAsSeller", []),
    _write(
        "updateOrderStatus",
        [
            {"name": "orderId", "type": "uint256"},
            {"name": "status", "type": "uint8"},
        ],
    ),
    _write(
        "addShippingInfo",
        [
            {"name": "orderId", "type": "uint256"},
            {"name": "street", "type": "string"},
            {"name": "city", "type": "string"},
            {"name": "state", "type": "string"},
            {"name": "zipCode", "type": "string"},
            {"name": "country", "type": "string"},
        ],
    ),
]
