from .command import CancelPairing, FinishPairing, StartPairing


class PairingData(object):
    """
    What the device handed back from begin_pair(). Needed, unchanged, for the
    matching finish_pair() or cancel_pair() call.
    """

    def __init__(self, client_name, client_id, pairing_token, challenge):
        self.client_name = client_name
        self.client_id = client_id
        self.pairing_token = pairing_token
        self.challenge = challenge

    def __repr__(self):
        return "<PairingData client_id=%r token=%r challenge=%r>" % (
            self.client_id,
            self.pairing_token,
            self.challenge,
        )


class PairingMixin(object):
    """
    Pairing exchange for Device. The device shows a PIN on screen once
    begin_pair() is called; finish_pair() sends it back and yields the auth
    token. Out-of-order calls are rejected by the device itself.
    """

    async def begin_pair(self, client_name, client_id):
        response = await self.send_command(StartPairing(client_name, client_id))
        pairing_token, challenge = response.pairing()
        self._log.debug(
            "%s: pairing started for %r (challenge %s)", self.name, client_id, challenge
        )
        return PairingData(client_name, client_id, pairing_token, challenge)

    async def finish_pair(self, pairing_data, pin):
        """
        Send the PIN shown by the device. Anything but digits is stripped
        from `pin`. Returns the auth token, which is also kept on the device
        for subsequent calls.
        """
        response = await self.send_command(
            FinishPairing(
                pairing_data.client_id,
                pairing_data.pairing_token,
                pairing_data.challenge,
                pin,
            )
        )
        token = response.auth_token()
        async with self._token_lock:
            self._auth_token = token
        self._log.debug("%s: paired as %r", self.name, pairing_data.client_id)
        return token

    async def cancel_pair(self, pairing_data):
        await self.send_command(
            CancelPairing(
                pairing_data.client_id,
                pairing_data.pairing_token,
                pairing_data.challenge,
            )
        )
        self._log.debug("%s: pairing cancelled for %r", self.name, pairing_data.client_id)
