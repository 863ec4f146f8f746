"""
Aurora contracts: the contract stdlib (``contracts.stdlib``), the
MintOnAurora issuance authority (``contracts.mint_on_aurora``) and the
operator tooling that deploys and calls it (``contracts.tools``).
"""
