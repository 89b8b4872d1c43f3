import json

import pytest

from feeshare.address import AccAddress
from feeshare.errors import InvalidAddressError
from feeshare.keys import ROUTER_KEY
from feeshare.msgs import (
    TYPE_MSG_CANCEL_FEE_SHARE,
    TYPE_MSG_REGISTER_FEE_SHARE,
    TYPE_MSG_UPDATE_FEE_SHARE,
    MsgCancelFeeShare,
    MsgRegisterFeeShare,
    MsgUpdateFeeShare,
    QueryDeployerFeeSharesRequest,
    QueryFeeShareRequest,
    QueryWithdrawerFeeSharesRequest,
    amino_name,
    new_msg_cancel_fee_share,
    new_msg_register_fee_share,
    new_msg_update_fee_share,
    registered_message_types,
)

CONTRACT = AccAddress(b"cosmos15u3dt79t6sxxa3x3kpkhzsy56edaa5a66wvt3kxmukqjz2sx0hesh45zsv")
DEPLOYER = AccAddress(b"cosmos1")
DEPLOYER_STR = str(DEPLOYER)
WITHDRAWER_STR = str(AccAddress(b"cosmos2"))


def test_register_getters():
    msg = new_msg_register_fee_share(CONTRACT, DEPLOYER, DEPLOYER)
    assert msg.route() == ROUTER_KEY
    assert msg.type() == TYPE_MSG_REGISTER_FEE_SHARE
    assert MsgRegisterFeeShare().get_sign_bytes() == b'{"type":"juno/MsgRegisterFeeShare","value":{}}'
    assert msg.get_signers() == [DEPLOYER]


def test_register_sign_bytes_sorted():
    msg = new_msg_register_fee_share(CONTRACT, DEPLOYER, DEPLOYER)
    raw = msg.get_sign_bytes()
    decoded = json.loads(raw)
    assert decoded == {
        "type": "juno/MsgRegisterFeeShare",
        "value": {
            "contract_address": str(CONTRACT),
            "deployer_address": DEPLOYER_STR,
            "withdrawer_address": DEPLOYER_STR,
        },
    }
    assert raw == json.dumps(decoded, sort_keys=True, separators=(",", ":")).encode()


def test_register_without_withdrawer():
    msg = new_msg_register_fee_share(CONTRACT, DEPLOYER, None)
    assert msg.withdrawer_address == ""


@pytest.mark.parametrize(
    "contract,deployer,withdraw",
    [
        (str(CONTRACT), DEPLOYER_STR, WITHDRAWER_STR),
        (str(CONTRACT), DEPLOYER_STR, ""),
        (str(CONTRACT), DEPLOYER_STR, DEPLOYER_STR),
    ],
)
def test_register_validate_pass(contract, deployer, withdraw):
    msg = MsgRegisterFeeShare(contract, deployer, withdraw)
    msg.validate_basic()
    assert msg.get_signers() == [DEPLOYER]


@pytest.mark.parametrize(
    "message,contract,deployer,withdraw",
    [
        ("invalid contract address", "", DEPLOYER_STR, WITHDRAWER_STR),
        ("invalid deployer address", str(CONTRACT), "", WITHDRAWER_STR),
        ("invalid withdraw address", str(CONTRACT), DEPLOYER_STR, "withdraw"),
    ],
)
def test_register_validate_fail(message, contract, deployer, withdraw):
    msg = MsgRegisterFeeShare(contract, deployer, withdraw)
    with pytest.raises(InvalidAddressError, match=message):
        msg.validate_basic()


def test_cancel_getters():
    msg = new_msg_cancel_fee_share(CONTRACT, AccAddress(bytes(DEPLOYER)))
    assert msg.route() == ROUTER_KEY
    assert msg.type() == TYPE_MSG_CANCEL_FEE_SHARE
    assert MsgCancelFeeShare().get_sign_bytes() == b'{"type":"juno/MsgCancelFeeShare","value":{}}'
    assert msg.get_signers() == [DEPLOYER]


def test_cancel_validate_pass():
    msg = MsgCancelFeeShare(str(CONTRACT), DEPLOYER_STR)
    msg.validate_basic()
    assert msg.contract_address == str(CONTRACT)


def test_cancel_validate_bad_deployer():
    with pytest.raises(InvalidAddressError, match="invalid deployer address"):
        MsgCancelFeeShare(str(CONTRACT), "").validate_basic()


def test_cancel_validate_bad_contract():
    with pytest.raises(InvalidAddressError):
        MsgCancelFeeShare("invalid", DEPLOYER_STR).validate_basic()


def test_update_getters():
    msg = new_msg_update_fee_share(CONTRACT, DEPLOYER, DEPLOYER)
    assert msg.route() == ROUTER_KEY
    assert msg.type() == TYPE_MSG_UPDATE_FEE_SHARE
    assert MsgUpdateFeeShare().get_sign_bytes() == b'{"type":"juno/MsgUpdateFeeShare","value":{}}'
    assert msg.get_signers() == [DEPLOYER]


@pytest.mark.parametrize(
    "contract,deployer,withdraw",
    [
        (str(CONTRACT), DEPLOYER_STR, WITHDRAWER_STR),
        (str(CONTRACT), DEPLOYER_STR, DEPLOYER_STR),
    ],
)
def test_update_validate_pass(contract, deployer, withdraw):
    msg = MsgUpdateFeeShare(contract, deployer, withdraw)
    msg.validate_basic()
    assert msg.get_signers() == [DEPLOYER]


@pytest.mark.parametrize(
    "message,contract,deployer,withdraw",
    [
        ("invalid contract address", "", DEPLOYER_STR, WITHDRAWER_STR),
        ("invalid withdraw address", str(CONTRACT), DEPLOYER_STR, "withdraw"),
    ],
)
def test_update_validate_fail(message, contract, deployer, withdraw):
    with pytest.raises(InvalidAddressError, match=message):
        MsgUpdateFeeShare(contract, deployer, withdraw).validate_basic()


def test_signers_of_invalid_deployer_is_empty_address():
    assert MsgUpdateFeeShare().get_signers() == [AccAddress()]


def test_registered_message_types():
    types = registered_message_types()
    assert len(types) == 3
    assert set(types) == {
        "/juno.feeshare.v1.MsgRegisterFeeShare",
        "/juno.feeshare.v1.MsgCancelFeeShare",
        "/juno.feeshare.v1.MsgUpdateFeeShare",
    }
    assert types["/juno.feeshare.v1.MsgCancelFeeShare"] is MsgCancelFeeShare


def test_amino_names():
    assert amino_name(MsgCancelFeeShare()) == "juno/MsgCancelFeeShare"
    assert amino_name(MsgRegisterFeeShare) == "juno/MsgRegisterFeeShare"
    assert amino_name(MsgUpdateFeeShare()) == "juno/MsgUpdateFeeShare"
    with pytest.raises(TypeError):
        amino_name(QueryFeeShareRequest())


def test_query_requests_validate():
    QueryFeeShareRequest(str(CONTRACT)).validate_basic()
    with pytest.raises(InvalidAddressError, match="invalid contract address"):
        QueryFeeShareRequest("juno").validate_basic()
    with pytest.raises(InvalidAddressError, match="invalid deployer address"):
        QueryDeployerFeeSharesRequest("").validate_basic()
    with pytest.raises(InvalidAddressError, match="invalid withdraw address"):
        QueryWithdrawerFeeSharesRequest("withdraw").validate_basic()
    request = QueryWithdrawerFeeSharesRequest(WITHDRAWER_STR)
    request.validate_basic()
    assert request.pagination is None